from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ChatReply:
    session_id: str
    action: str  # "confirm_cancel", "cancelled", "not_found", "ask_details", "rephrase", "stop", ...
    text: str
    intent: dict[str, Any]
    meta: dict[str, Any] = field(default_factory=dict)
