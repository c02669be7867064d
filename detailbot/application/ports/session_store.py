from abc import ABC, abstractmethod

from detailbot.domain.entities.session import Session


class SessionStorePort(ABC):
    @abstractmethod
    def get(self, identity: str) -> Session | None:
        raise NotImplementedError

    @abstractmethod
    def put(self, identity: str, session: Session) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, identity: str) -> None:
        raise NotImplementedError
