from abc import ABC, abstractmethod

from spa_manager.domain.entities.chat_state import ChatSessionState


class ChatSessionStorePort(ABC):
    @abstractmethod
    def get_or_create(self, session_id: str | None) -> str:
        raise NotImplementedError

    @abstractmethod
    def get_state(self, session_id: str) -> ChatSessionState:
        raise NotImplementedError

    @abstractmethod
    def set_state(self, session_id: str, state: ChatSessionState) -> None:
        raise NotImplementedError
