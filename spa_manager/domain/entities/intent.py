from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union


@dataclass(frozen=True)
class AppointmentCommand:
    """Fields shared by commands that act on one appointment."""

    client_name: str
    time: str | None = None  # raw, not normalized
    date: str | None = None  # raw phrase, e.g. "August 19th"
    year: str | None = None
    confidence: float = 1.0
    pattern: str | None = None

    type: ClassVar[str] = "appointment"

    @property
    def missing_fields(self) -> list[str]:
        return [name for name in ("time", "date") if getattr(self, name) is None]


@dataclass(frozen=True)
class CancelIntent(AppointmentCommand):
    type: ClassVar[str] = "cancel"


@dataclass(frozen=True)
class CompleteIntent(AppointmentCommand):
    type: ClassVar[str] = "complete"


@dataclass(frozen=True)
class AffirmativeIntent:
    confidence: float = 1.0

    type: ClassVar[str] = "affirmative"


@dataclass(frozen=True)
class StopIntent:
    confidence: float = 1.0

    type: ClassVar[str] = "stop"


@dataclass(frozen=True)
class NoIntent:
    confidence: float = 0.0

    type: ClassVar[str] = "none"


CommandIntent = Union[CancelIntent, CompleteIntent, AffirmativeIntent, StopIntent, NoIntent]

INTENT_BY_KIND: dict[str, type[AppointmentCommand]] = {
    CancelIntent.type: CancelIntent,
    CompleteIntent.type: CompleteIntent,
}


def intent_to_wire(intent: CommandIntent) -> dict[str, Any]:
    """Render an intent in the chat wire shape (camelCase keys, absent fields omitted)."""
    payload: dict[str, Any] = {"type": intent.type, "confidence": intent.confidence}
    if isinstance(intent, AppointmentCommand):
        payload["clientName"] = intent.client_name
        for key in ("time", "date", "year"):
            value = getattr(intent, key)
            if value is not None:
                payload[key] = value
    return payload
