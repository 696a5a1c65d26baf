from __future__ import annotations

import re
from datetime import date, datetime
from zoneinfo import ZoneInfo

from spa_manager.application.exceptions import DateParseError, UnrecognizedMonth
from spa_manager.domain.entities.parsed_date import ParsedDate

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

CANONICAL_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATE_PHRASE_PATTERN = re.compile(r"^[a-zA-Z]+\s+\d+(?:st|nd|rd|th)?$", re.IGNORECASE)
YEAR_PATTERN = re.compile(r"^\d{4}$")


def format_canonical_date(value: date | ParsedDate) -> str:
    if isinstance(value, ParsedDate):
        value = value.parsed_date
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_canonical_date(text: str) -> date | None:
    """Parse a strict YYYY-MM-DD string. Returns None when the text is not a real date."""
    if not text or not CANONICAL_DATE_PATTERN.match(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def is_valid_date_phrase(text: str) -> bool:
    return bool(text) and bool(DATE_PHRASE_PATTERN.match(text.strip()))


def parse_date_phrase(
    phrase: str,
    year: str | None = None,
    reference_date: date | None = None,
    timezone: ZoneInfo | None = None,
) -> ParsedDate:
    """
    Parse "<month name> <day>" (e.g. "August 19th") into a calendar date.

    With an explicit year the date is taken literally, even if it is in the past.
    Without one, the current year is used and a date before today rolls to next year.
    """
    if reference_date is None:
        reference_date = datetime.now(timezone).date()

    parts = re.sub(r"\s+", " ", (phrase or "").lower()).strip().split(" ")
    if len(parts) < 2:
        raise UnrecognizedMonth(f"Date format not recognized: {phrase}", original_input=phrase)

    month_name, day_digits = parts[0], re.sub(r"\D", "", parts[1])
    if month_name not in MONTH_NAMES:
        raise UnrecognizedMonth(f"Unrecognized month: {phrase}", original_input=phrase)
    if not day_digits:
        raise DateParseError(f"Missing day in: {phrase}", original_input=phrase)

    month = MONTH_NAMES.index(month_name) + 1
    day = int(day_digits)

    explicit_year = bool(year)
    if explicit_year:
        if not YEAR_PATTERN.match(str(year).strip()):
            raise DateParseError(f"Invalid year {year!r} for: {phrase}", original_input=phrase)
        target_year = int(str(year).strip())
    else:
        target_year = reference_date.year

    try:
        parsed = date(target_year, month, day)
        if not explicit_year and parsed < reference_date:
            parsed = date(target_year + 1, month, day)
    except ValueError as e:
        raise DateParseError(f"Failed to parse date: {phrase}", original_input=phrase) from e

    return ParsedDate(
        parsed_date=parsed,
        formatted_date=format_canonical_date(parsed),
        year=str(parsed.year),
    )
