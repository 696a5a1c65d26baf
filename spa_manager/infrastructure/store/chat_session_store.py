from __future__ import annotations

import threading
import uuid

from spa_manager.application.ports.chat_session_store import ChatSessionStorePort
from spa_manager.domain.entities.chat_state import ChatSessionState


class MemoryChatSessionStore(ChatSessionStorePort):
    def __init__(self) -> None:
        self._states: dict[str, ChatSessionState] = {}
        self._lock = threading.Lock()

    def get_or_create(self, session_id: str | None) -> str:
        with self._lock:
            if session_id and session_id in self._states:
                return session_id
            sid = session_id or uuid.uuid4().hex
            self._states.setdefault(sid, ChatSessionState())
            return sid

    def get_state(self, session_id: str) -> ChatSessionState:
        with self._lock:
            return self._states.get(session_id, ChatSessionState())

    def set_state(self, session_id: str, state: ChatSessionState) -> None:
        with self._lock:
            self._states[session_id] = state
