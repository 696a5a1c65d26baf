from __future__ import annotations

import logging

from spa_manager.application.utils.command_patterns import (
    AFFIRMATIVE_PATTERN,
    APPOINTMENT_PATTERNS,
    STOP_PATTERN,
    CommandPattern,
)
from spa_manager.domain.entities.intent import (
    INTENT_BY_KIND,
    AffirmativeIntent,
    CommandIntent,
    NoIntent,
    StopIntent,
)


class InterpretCommandUseCase:
    """Classify a chat utterance with the ordered pattern table. First match wins."""

    def __init__(
        self,
        appointment_patterns: tuple[CommandPattern, ...] = APPOINTMENT_PATTERNS,
        stop_pattern: CommandPattern = STOP_PATTERN,
        affirmative_pattern: CommandPattern = AFFIRMATIVE_PATTERN,
    ) -> None:
        self._appointment_patterns = appointment_patterns
        self._stop_pattern = stop_pattern
        self._affirmative_pattern = affirmative_pattern
        self._logger = logging.getLogger(__name__)

    def execute(self, text: str, year_hint: str | None = None) -> CommandIntent:
        utterance = (text or "").strip()
        if not utterance:
            return NoIntent()

        for pattern in self._appointment_patterns:
            values = pattern.extract(utterance)
            if values is None:
                continue
            date_phrase = values.get("date")
            year = values.get("year") or (year_hint if date_phrase else None)
            intent = INTENT_BY_KIND[pattern.kind](
                client_name=values["client_name"],
                time=values.get("time"),
                date=date_phrase,
                year=year,
                confidence=pattern.confidence,
                pattern=pattern.name,
            )
            self._logger.debug("Command matched", extra={"intent": intent.type, "pattern": pattern.name})
            return intent

        if self._stop_pattern.extract(utterance) is not None:
            return StopIntent(confidence=self._stop_pattern.confidence)

        if self._affirmative_pattern.extract(utterance) is not None:
            return AffirmativeIntent(confidence=self._affirmative_pattern.confidence)

        return NoIntent()
