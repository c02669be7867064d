from abc import ABC, abstractmethod
from typing import Any

from detailbot.domain.entities.effects import Effect


class ReplyRendererPort(ABC):
    @abstractmethod
    def render(self, effect: Effect) -> list[dict[str, Any]]:
        """Turn a dialog effect into platform message objects."""
        raise NotImplementedError

    @abstractmethod
    def render_failure(self) -> list[dict[str, Any]]:
        """Messages shown when a turn fails internally."""
        raise NotImplementedError
