from __future__ import annotations

from detailbot.domain.entities.service_catalog import Category, ServiceCatalog, SubService, VehicleClass


def _prices(small: int, sedan: int, suv: int) -> dict[VehicleClass, int]:
    return {VehicleClass.SMALL: small, VehicleClass.SEDAN: sedan, VehicleClass.SUV: suv}


SERVICE_CATALOG = ServiceCatalog(
    categories=(
        Category(
            name="清潔養護",
            sub_services=(
                SubService("基礎洗車", "基礎洗車：僅清洗車身外部。", _prices(500, 700, 900)),
                SubService("高級洗車", "高級洗車：包含車內吸塵和車身打蠟。", _prices(800, 1000, 1300)),
            ),
            difference_text="基礎洗車：僅清洗車身外部。\n高級洗車：包含車內吸塵和車身打蠟。",
        ),
        Category(
            name="拋光美容",
            sub_services=(
                SubService("打蠟", "打蠟：手工塗抹蠟增進車漆光澤。", _prices(1500, 1800, 2200)),
                SubService("拋光", "拋光：機器拋光去除細微刮痕。", _prices(2000, 2500, 3000)),
            ),
            difference_text="打蠟：手工塗抹蠟增進車漆光澤。\n拋光：使用拋光機處理，減少車漆瑕疵。",
        ),
        Category(
            name="鍍膜套餐",
            sub_services=(
                SubService("單層鍍膜", "單層鍍膜：一層鍍膜施工。", _prices(5000, 6000, 7000)),
                SubService("雙層鍍膜", "雙層鍍膜：兩層鍍膜，更持久亮度。", _prices(8000, 9000, 10000)),
            ),
            difference_text="單層鍍膜：基礎鍍膜一次。\n雙層鍍膜：重複鍍膜兩次，提升持久度和光澤。",
        ),
        # Single service, priced on the category itself.
        Category(
            name="全車玻璃鍍膜+除油膜",
            direct_price=_prices(3000, 3000, 3500),
        ),
    )
)
