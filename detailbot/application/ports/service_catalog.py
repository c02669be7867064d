from __future__ import annotations

from abc import ABC, abstractmethod

from detailbot.domain.entities.service_catalog import Category, ServiceCatalog


class ServiceCatalogPort(ABC):
    @abstractmethod
    def get_catalog(self) -> ServiceCatalog:
        raise NotImplementedError

    @abstractmethod
    def get_category(self, name: str) -> Category | None:
        """Get category by exact name."""
        raise NotImplementedError

    @abstractmethod
    def category_names(self) -> list[str]:
        """Category names in display order."""
        raise NotImplementedError
