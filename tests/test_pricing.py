"""
Tests for the pricing resolver against the default catalog.
"""

from __future__ import annotations

import pytest

from detailbot.application.exceptions import InvalidCatalogError
from detailbot.application.use_cases.pricing import PricingResolver
from detailbot.domain.entities.service_catalog import Category, ServiceCatalog, SubService, VehicleClass
from detailbot.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore


def test_every_reachable_combination_is_priced():
    """Each category/sub-service/vehicle class the dialog can produce has a price."""
    store = ServiceCatalogStore()
    resolver = PricingResolver(store)

    for category in store.get_catalog().categories:
        sub_names = [sub.name for sub in category.sub_services] or [None]
        for sub_name in sub_names:
            for vehicle_class in VehicleClass:
                price = resolver.resolve(category.name, sub_name, vehicle_class)
                assert price is not None and price > 0, (category.name, sub_name, vehicle_class)


@pytest.mark.parametrize(
    "category, sub_service, vehicle_class, expected",
    [
        ("清潔養護", "基礎洗車", VehicleClass.SMALL, 500),
        ("清潔養護", "高級洗車", VehicleClass.SUV, 1300),
        ("拋光美容", "打蠟", VehicleClass.SEDAN, 1800),
        ("鍍膜套餐", "單層鍍膜", VehicleClass.SUV, 7000),
        ("全車玻璃鍍膜+除油膜", None, VehicleClass.SEDAN, 3000),
        ("全車玻璃鍍膜+除油膜", None, VehicleClass.SUV, 3500),
    ],
)
def test_known_prices(category, sub_service, vehicle_class, expected):
    resolver = PricingResolver(ServiceCatalogStore())
    assert resolver.resolve(category, sub_service, vehicle_class) == expected


def test_not_priced_combinations():
    resolver = PricingResolver(ServiceCatalogStore())
    assert resolver.resolve("不存在", None, VehicleClass.SMALL) is None
    assert resolver.resolve("清潔養護", None, VehicleClass.SMALL) is None
    assert resolver.resolve("清潔養護", "打蠟", VehicleClass.SMALL) is None
    assert resolver.resolve("全車玻璃鍍膜+除油膜", "基礎洗車", VehicleClass.SMALL) is None


def test_missing_vehicle_class_is_not_priced():
    catalog = ServiceCatalog(
        categories=(Category(name="內裝清潔", direct_price={VehicleClass.SMALL: 1200}),)
    )
    resolver = PricingResolver(ServiceCatalogStore(catalog))
    assert resolver.resolve("內裝清潔", None, VehicleClass.SMALL) == 1200
    assert resolver.resolve("內裝清潔", None, VehicleClass.SUV) is None


def test_catalog_rejects_unpriced_category():
    with pytest.raises(InvalidCatalogError):
        ServiceCatalog(categories=(Category(name="空類別"),))


def test_catalog_rejects_non_positive_price():
    with pytest.raises(InvalidCatalogError):
        ServiceCatalog(
            categories=(
                Category(
                    name="清潔養護",
                    sub_services=(SubService("基礎洗車", "", {VehicleClass.SMALL: 0}),),
                ),
            )
        )


def test_catalog_rejects_duplicate_names():
    table = {VehicleClass.SMALL: 100}
    with pytest.raises(InvalidCatalogError):
        ServiceCatalog(categories=(Category(name="A", direct_price=table), Category(name="A", direct_price=table)))
