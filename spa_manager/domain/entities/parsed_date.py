from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class ParsedDate:
    parsed_date: date
    formatted_date: str  # YYYY-MM-DD
    year: str
