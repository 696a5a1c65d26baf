from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PendingCancellation:
    appointment_id: int
    client: str
    time: str  # h:mm AM/PM
    date: str  # YYYY-MM-DD


@dataclass(frozen=True)
class PendingCompletion:
    appointment_id: int
    client: str
    time: str  # h:mm AM/PM
    date: str  # YYYY-MM-DD
    tip: Decimal | None = None  # None until the tip question is answered


@dataclass(frozen=True)
class ChatSessionState:
    last_intent: str | None = None
    pending_cancellation: PendingCancellation | None = None
    pending_completion: PendingCompletion | None = None
    last_year: str | None = None  # year hint carried to later messages
    updated_at: float | None = None
