from abc import ABC, abstractmethod

from detailbot.domain.entities.user_memory import UserMemory


class UserMemoryStorePort(ABC):
    @abstractmethod
    def get(self, identity: str) -> UserMemory | None:
        raise NotImplementedError

    @abstractmethod
    def put(self, identity: str, memory: UserMemory) -> None:
        """Overwrite the remembered attributes for identity."""
        raise NotImplementedError
