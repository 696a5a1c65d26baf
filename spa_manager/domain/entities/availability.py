from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AvailabilityResult:
    date: str
    available: bool
    reason: str | None = None
    available_times: list[str] = field(default_factory=list)
    booked_times: list[str] = field(default_factory=list)
    all_slots: list[str] = field(default_factory=list)
