from __future__ import annotations

import re
from dataclasses import dataclass

CLIENT_NAME = r"([a-zA-Z0-9\-'\s]+)"
CLIENT_NAME_SHORTEST = r"([a-zA-Z0-9\-'\s]+?)"
TIME = r"(\d{1,2}(?::\d{2})?\s*(?:a\.?m\.?|p\.?m\.?)|\d{1,2}(?::?\d{2})?\s*hours?)"
# The month word is never one of the connecting words around it.
DATE = r"((?!(?:at|on|for)\b)[a-zA-Z]+\s+\d+(?:st|nd|rd|th)?)"
YEAR = r"(?:,?\s+(\d{4}))?\b"
OPTIONAL_THE = r"(?:the\s+)?"
APPOINTMENT = r"(?:appointment|booking)"
OPTIONAL_FOR = r"(?:for\s+)?(?!for\s)"


@dataclass(frozen=True)
class CommandPattern:
    name: str
    kind: str  # "cancel" | "complete" | "stop" | "affirmative"
    regex: re.Pattern[str]
    confidence: float
    groups: tuple[str, ...] = ()

    def extract(self, text: str) -> dict[str, str | None] | None:
        match = self.regex.search(text)
        if not match:
            return None
        values = {}
        for name, value in zip(self.groups, match.groups()):
            values[name] = value.strip() if value is not None else None
        return values


def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def _appointment_family(verb: str, prefix: str = "") -> tuple[CommandPattern, ...]:
    """The seven "<verb> ... appointment" forms, most specific first."""
    full_form = rf"{verb}\s+{OPTIONAL_THE}{APPOINTMENT}\s+for\s+{CLIENT_NAME}\s+at\s+{TIME}\s+on\s+{DATE}{YEAR}"
    with_time_and_date = ("client_name", "time", "date", "year")
    return (
        CommandPattern(
            name=f"{prefix}client_date_time_full",
            kind=verb,
            regex=_compile(full_form),
            confidence=1.0,
            groups=with_time_and_date,
        ),
        CommandPattern(
            name=f"{prefix}category_date_time_full",
            kind=verb,
            regex=_compile(rf"{verb}\s+{CLIENT_NAME}\s+{APPOINTMENT}\s+at\s+{TIME}\s+on\s+{DATE}{YEAR}"),
            confidence=0.9,
            groups=with_time_and_date,
        ),
        CommandPattern(
            name=f"{prefix}first_name_date_time_full",
            kind=verb,
            regex=_compile(full_form),
            confidence=0.8,
            groups=with_time_and_date,
        ),
        CommandPattern(
            name=f"{prefix}last_name_date_time_full",
            kind=verb,
            regex=_compile(full_form),
            confidence=0.8,
            groups=with_time_and_date,
        ),
        CommandPattern(
            name=f"{prefix}client_time",
            kind=verb,
            regex=_compile(rf"{verb}\s+{OPTIONAL_THE}{APPOINTMENT}\s+{OPTIONAL_FOR}{CLIENT_NAME}\s+at\s+{TIME}$"),
            confidence=0.7,
            groups=("client_name", "time"),
        ),
        CommandPattern(
            name=f"{prefix}client_date",
            kind=verb,
            regex=_compile(
                rf"{verb}\s+{OPTIONAL_THE}{APPOINTMENT}\s+{OPTIONAL_FOR}{CLIENT_NAME_SHORTEST}\s+(?:on\s+)?{DATE}{YEAR}"
            ),
            confidence=0.6,
            groups=("client_name", "date", "year"),
        ),
        CommandPattern(
            name=f"{prefix}client_only",
            kind=verb,
            regex=_compile(rf"{verb}\s+{OPTIONAL_THE}{APPOINTMENT}\s+{OPTIONAL_FOR}{CLIENT_NAME}$"),
            confidence=0.5,
            groups=("client_name",),
        ),
    )


# Most specific first: the first pattern that matches wins.
CANCEL_PATTERNS: tuple[CommandPattern, ...] = _appointment_family("cancel")
COMPLETE_PATTERNS: tuple[CommandPattern, ...] = _appointment_family("complete", prefix="complete_")
APPOINTMENT_PATTERNS: tuple[CommandPattern, ...] = CANCEL_PATTERNS + COMPLETE_PATTERNS

STOP_PATTERN = CommandPattern(
    name="stop_talking",
    kind="stop",
    regex=_compile(r"\b(?:stop\s+talking|shut\s+up|be\s+quiet|that'?s\s+all)\b"),
    confidence=1.0,
)

AFFIRMATIVE_PATTERN = CommandPattern(
    name="affirmative",
    kind="affirmative",
    regex=_compile(r"\b(?:yes|confirmed|affirmative)\b"),
    confidence=1.0,
)
