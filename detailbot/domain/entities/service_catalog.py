from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class VehicleClass(str, Enum):
    SMALL = "small"
    SEDAN = "sedan"
    SUV = "suv"

    @property
    def label(self) -> str:
        return VEHICLE_LABELS[self]

    @property
    def example(self) -> str:
        return VEHICLE_EXAMPLES[self]

    @staticmethod
    def from_label(text: str) -> "VehicleClass | None":
        for vehicle_class, label in VEHICLE_LABELS.items():
            if label == text:
                return vehicle_class
        return None


VEHICLE_LABELS: dict[VehicleClass, str] = {
    VehicleClass.SMALL: "小型車",
    VehicleClass.SEDAN: "中型車",
    VehicleClass.SUV: "大型車/SUV",
}

VEHICLE_EXAMPLES: dict[VehicleClass, str] = {
    VehicleClass.SMALL: "例如：Yaris、Fit",
    VehicleClass.SEDAN: "例如：Corolla、Civic",
    VehicleClass.SUV: "例如：RAV4、CR-V",
}


PriceTable = Mapping[VehicleClass, int]


@dataclass(frozen=True)
class SubService:
    name: str
    difference_text: str
    price_table: PriceTable


@dataclass(frozen=True)
class Category:
    name: str
    sub_services: tuple[SubService, ...] = ()
    direct_price: PriceTable | None = None
    difference_text: str | None = None

    @property
    def has_sub_services(self) -> bool:
        return len(self.sub_services) > 0

    def find_sub_service(self, name: str) -> SubService | None:
        for sub in self.sub_services:
            if sub.name == name:
                return sub
        return None


@dataclass(frozen=True)
class ServiceCatalog:
    """Ordered, immutable list of categories."""

    categories: tuple[Category, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        from detailbot.application.exceptions import InvalidCatalogError

        seen: set[str] = set()
        for category in self.categories:
            if category.name in seen:
                raise InvalidCatalogError(f"Duplicate category: {category.name}")
            seen.add(category.name)
            tables = [sub.price_table for sub in category.sub_services]
            if not tables:
                if not category.direct_price:
                    raise InvalidCatalogError(f"Category {category.name} has neither sub-services nor a direct price")
                tables = [category.direct_price]
            for table in tables:
                for price in table.values():
                    if price <= 0:
                        raise InvalidCatalogError(f"Category {category.name} has a non-positive price")

    def names(self) -> list[str]:
        return [category.name for category in self.categories]

    def get(self, name: str) -> Category | None:
        for category in self.categories:
            if category.name == name:
                return category
        return None
