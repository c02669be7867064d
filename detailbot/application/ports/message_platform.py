from abc import ABC, abstractmethod
from typing import Any


class MessagePlatformPort(ABC):
    @abstractmethod
    def reply(self, reply_token: str, messages: list[dict[str, Any]]) -> None:
        raise NotImplementedError
