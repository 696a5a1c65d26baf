from __future__ import annotations

import re

from spa_manager.application.exceptions import TimeParseError

TWELVE_HOUR_PATTERN = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*(AM|PM)$", re.IGNORECASE)
MILITARY_PATTERN = re.compile(r"^(\d{1,2}):?(\d{2})?\s*hours?$", re.IGNORECASE)
MILITARY_COMPACT_PATTERN = re.compile(r"^(\d{3,4})\s*hours?$", re.IGNORECASE)

CLIENT_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9\-'\s]+$")
TIME_TOKEN_PATTERN = re.compile(
    r"^(\d{1,2}(?::\d{2})?\s*(?:a\.?m\.?|p\.?m\.?)|\d{1,4}(?::\d{2})?\s*hours?)$",
    re.IGNORECASE,
)


def is_military_time(text: str) -> bool:
    return "hour" in text.lower()


def military_to_twelve_hour(text: str) -> str:
    """Convert "1900 hours" / "19:00 hours" to "7:00 PM"."""
    raw = text.strip()
    compact = MILITARY_COMPACT_PATTERN.match(raw)
    if compact:
        digits = compact.group(1).zfill(4)
        hour, minute = int(digits[:2]), int(digits[2:])
    else:
        match = MILITARY_PATTERN.match(raw)
        if not match:
            raise TimeParseError(f"Unrecognized military time: {text}", original_input=text)
        hour = int(match.group(1))
        minute = int(match.group(2) or 0)

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise TimeParseError(f"Military time out of range: {text}", original_input=text)

    if hour == 0:
        return f"12:{minute:02d} AM"
    if hour == 12:
        return f"12:{minute:02d} PM"
    if hour > 12:
        return f"{hour - 12}:{minute:02d} PM"
    return f"{hour}:{minute:02d} AM"


def normalize_time(text: str) -> str:
    """
    Normalize a spoken/typed time to the canonical "h:mm AM/PM" form.

    Accepts 12-hour input ("5 pm", "2:30 p.m.", "02:30 PM") and military
    input ("1900 hours", "19:00 hours"). Raises TimeParseError otherwise.
    """
    if not text or not text.strip():
        raise TimeParseError("Empty time", original_input=text)

    if is_military_time(text):
        return military_to_twelve_hour(text)

    cleaned = text.replace(".", "").strip().upper()
    match = TWELVE_HOUR_PATTERN.match(cleaned)
    if not match:
        raise TimeParseError(f"Unrecognized time: {text}", original_input=text)

    hour = int(match.group(1))
    minutes = match.group(2) or "00"
    if not (1 <= hour <= 12 and 0 <= int(minutes) <= 59):
        raise TimeParseError(f"Time out of range: {text}", original_input=text)
    return f"{hour}:{minutes} {match.group(3).upper()}"


def to_minutes(canonical: str) -> int:
    """Minutes since midnight for a time in any form normalize_time accepts."""
    match = TWELVE_HOUR_PATTERN.match(normalize_time(canonical))
    hour = int(match.group(1)) % 12
    if match.group(3).upper() == "PM":
        hour += 12
    return hour * 60 + int(match.group(2))


def format_minutes(total: int) -> str:
    """Inverse of to_minutes: 870 -> "2:30 PM"."""
    hour, minute = divmod(total % (24 * 60), 60)
    period = "AM" if hour < 12 else "PM"
    display = hour % 12 or 12
    return f"{display}:{minute:02d} {period}"


def is_valid_client_name(name: str) -> bool:
    return bool(name) and bool(CLIENT_NAME_PATTERN.match(name))


def is_valid_time_format(text: str) -> bool:
    return bool(text) and bool(TIME_TOKEN_PATTERN.match(text.strip()))
