"""
Tests for chat command classification with the ordered pattern table.
"""

from __future__ import annotations

import pytest

from spa_manager.application.use_cases.interpret_command import InterpretCommandUseCase
from spa_manager.application.utils.command_patterns import APPOINTMENT_PATTERNS, CANCEL_PATTERNS
from spa_manager.domain.entities.intent import (
    AffirmativeIntent,
    CancelIntent,
    CompleteIntent,
    NoIntent,
    StopIntent,
    intent_to_wire,
)


def _interpret(text: str, year_hint: str | None = None):
    return InterpretCommandUseCase().execute(text, year_hint=year_hint)


def test_full_cancel_command_extracts_every_field():
    intent = _interpret("cancel the appointment for John Smith at 2:00 PM on August 19th 2025")

    assert intent_to_wire(intent) == {
        "type": "cancel",
        "confidence": 1.0,
        "clientName": "John Smith",
        "time": "2:00 PM",
        "date": "August 19th",
        "year": "2025",
    }
    assert intent.pattern == "client_date_time_full"


def test_first_matching_pattern_wins_over_later_ones():
    # The client+date pattern would also match this utterance.
    intent = _interpret("cancel appointment for Jane Doe at 3:30 pm on September 2nd")
    assert isinstance(intent, CancelIntent)
    assert intent.confidence == 1.0
    assert intent.year is None
    assert CANCEL_PATTERNS[0].name == intent.pattern


def test_name_before_keyword_form():
    intent = _interpret("cancel John Smith appointment at 3:30 PM on September 2nd")
    assert isinstance(intent, CancelIntent)
    assert intent.confidence == 0.9
    assert intent.client_name == "John Smith"
    assert intent.time == "3:30 PM"
    assert intent.date == "September 2nd"


def test_client_and_military_time_only():
    intent = _interpret("cancel appointment for Mary-Jane at 1900 hours")
    assert isinstance(intent, CancelIntent)
    assert intent.confidence == 0.7
    assert intent.client_name == "Mary-Jane"
    assert intent.time == "1900 hours"
    assert intent.date is None
    assert intent.missing_fields == ["date"]


def test_client_and_date_only():
    intent = _interpret("cancel the booking for O'Connor on August 19th 2026")
    assert isinstance(intent, CancelIntent)
    assert intent.confidence == 0.6
    assert intent.client_name == "O'Connor"
    assert intent.date == "August 19th"
    assert intent.year == "2026"
    assert intent.time is None


def test_client_and_date_keeps_full_name():
    intent = _interpret("cancel appointment for John Smith on August 19th")
    assert isinstance(intent, CancelIntent)
    assert intent.client_name == "John Smith"
    assert intent.date == "August 19th"


def test_client_only():
    intent = _interpret("Cancel appointment for Client 3")
    assert isinstance(intent, CancelIntent)
    assert intent.confidence == 0.5
    assert intent.client_name == "Client 3"
    assert intent.missing_fields == ["time", "date"]


@pytest.mark.parametrize("text", ["stop talking", "STOP TALKING", "Please shut up", "be quiet!", "that's all"])
def test_stop_phrases(text):
    intent = _interpret(text)
    assert isinstance(intent, StopIntent)
    assert intent_to_wire(intent) == {"type": "stop", "confidence": 1.0}


@pytest.mark.parametrize("text", ["yes", "Yes please", "Confirmed.", "affirmative"])
def test_affirmative_phrases(text):
    intent = _interpret(text)
    assert isinstance(intent, AffirmativeIntent)
    assert intent.confidence == 1.0


def test_cancel_family_is_checked_before_affirmative():
    intent = _interpret("yes cancel the appointment for Jane")
    assert isinstance(intent, CancelIntent)
    assert intent.client_name == "Jane"


@pytest.mark.parametrize("text", ["hello there", "yesterday was busy", "", "   "])
def test_unrecognized_input_is_none(text):
    intent = _interpret(text)
    assert isinstance(intent, NoIntent)
    assert intent_to_wire(intent) == {"type": "none", "confidence": 0.0}


def test_year_hint_fills_missing_year():
    intent = _interpret("cancel the appointment for Jane at 2 PM on August 19th", year_hint="2026")
    assert intent.year == "2026"


def test_explicit_year_beats_year_hint():
    intent = _interpret("cancel the appointment for Jane at 2 PM on August 19th 2025", year_hint="2026")
    assert intent.year == "2025"


def test_year_hint_ignored_without_date():
    intent = _interpret("cancel appointment for Jane at 2 PM", year_hint="2026")
    assert intent.year is None


@pytest.mark.parametrize("text", ["is that allowed on weekends", "that allowed?", "thats alright", "that's allowed"])
def test_words_starting_with_all_are_not_stop(text):
    assert not isinstance(_interpret(text), StopIntent)


def test_thats_all_without_apostrophe_is_stop():
    assert isinstance(_interpret("ok thats all"), StopIntent)


def test_year_after_comma_is_kept():
    intent = _interpret("cancel the appointment for John Smith at 2:00 PM on August 19th, 2025")
    assert intent.confidence == 1.0
    assert intent.date == "August 19th"
    assert intent.year == "2025"


def test_client_and_date_with_comma_year():
    intent = _interpret("cancel the booking for O'Connor on August 19th, 2026")
    assert intent.pattern == "client_date"
    assert intent.year == "2026"


def test_connecting_word_is_never_read_as_month():
    intent = _interpret("cancel appointment John at 2pm on August 19th")
    assert isinstance(intent, CancelIntent)
    assert intent.pattern == "client_date"
    assert intent.date == "August 19th"
    assert intent.client_name == "John at 2pm"


def test_full_complete_command_extracts_every_field():
    intent = _interpret("complete the appointment for Jane Doe at 2:00 PM on August 19th, 2025")

    assert isinstance(intent, CompleteIntent)
    assert intent.pattern == "complete_client_date_time_full"
    assert intent_to_wire(intent) == {
        "type": "complete",
        "confidence": 1.0,
        "clientName": "Jane Doe",
        "time": "2:00 PM",
        "date": "August 19th",
        "year": "2025",
    }


def test_complete_family_follows_the_cancel_shapes():
    by_name = _interpret("complete Jane Doe appointment at 3:30 PM on September 2nd")
    assert isinstance(by_name, CompleteIntent)
    assert by_name.confidence == 0.9

    client_only = _interpret("Complete booking for Jane")
    assert isinstance(client_only, CompleteIntent)
    assert client_only.pattern == "complete_client_only"
    assert client_only.missing_fields == ["time", "date"]


def test_cancel_patterns_are_tried_before_complete_patterns():
    assert APPOINTMENT_PATTERNS[: len(CANCEL_PATTERNS)] == CANCEL_PATTERNS
    assert all(p.kind == "complete" for p in APPOINTMENT_PATTERNS[len(CANCEL_PATTERNS):])
