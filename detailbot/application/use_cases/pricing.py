from __future__ import annotations

import logging

from detailbot.application.ports.service_catalog import ServiceCatalogPort
from detailbot.domain.entities.service_catalog import VehicleClass


class PricingResolver:
    def __init__(self, catalog: ServiceCatalogPort) -> None:
        self._catalog = catalog
        self._logger = logging.getLogger(__name__)

    def resolve(self, category: str, sub_service: str | None, vehicle_class: VehicleClass) -> int | None:
        """
        Look up the price for a category/sub-service/vehicle class.
        Returns None when the combination is not priced.
        """
        entry = self._catalog.get_category(category)
        if entry is None:
            return None

        if entry.has_sub_services:
            if not sub_service:
                return None
            sub = entry.find_sub_service(sub_service)
            if sub is None:
                return None
            table = sub.price_table
        else:
            if sub_service:
                return None
            table = entry.direct_price or {}

        price = table.get(vehicle_class)
        if price is None:
            self._logger.debug(
                "No price for vehicle class",
                extra={"service": category, "vehicle_class": vehicle_class.value},
            )
        return price
