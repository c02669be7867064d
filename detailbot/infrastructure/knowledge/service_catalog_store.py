from __future__ import annotations

from detailbot.application.ports.service_catalog import ServiceCatalogPort
from detailbot.domain.entities.service_catalog import Category, ServiceCatalog
from detailbot.infrastructure.knowledge.service_catalog_data import SERVICE_CATALOG


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, catalog: ServiceCatalog | None = None) -> None:
        self._catalog = catalog or SERVICE_CATALOG

    def get_catalog(self) -> ServiceCatalog:
        return self._catalog

    def get_category(self, name: str) -> Category | None:
        return self._catalog.get(name)

    def category_names(self) -> list[str]:
        return self._catalog.names()
