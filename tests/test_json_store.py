"""
Tests for durable appointment persistence in the JSON file store.
"""

from __future__ import annotations

import json
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest

from spa_manager.application.exceptions import StoreError
from spa_manager.domain.entities.appointment import AppointmentStatus, NewAppointment, ServiceCategory
from spa_manager.infrastructure.store.json_store import JsonAppointmentStore


def _new(date: str = "2025-08-19", time: str = "2:00 PM", client: str = "Jane Doe") -> NewAppointment:
    return NewAppointment(
        date=date,
        time=time,
        client=client,
        category=ServiceCategory.FACIAL,
        payment=ServiceCategory.FACIAL.price,
    )


def test_json_store_persistence():
    """Test that an inserted appointment can be read back with the same values."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonAppointmentStore(data_dir=tmpdir)

        created = store.insert(_new())
        retrieved = store.get(created.id)

        assert retrieved is not None
        assert retrieved.id == 1
        assert retrieved.client == "Jane Doe"
        assert retrieved.category == ServiceCategory.FACIAL
        assert retrieved.payment == Decimal("100.00")
        assert retrieved.status == AppointmentStatus.PENDING
        assert retrieved.created_at == created.created_at


def test_update_changes_fields_and_reports_rows():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonAppointmentStore(data_dir=tmpdir)
        created = store.insert(_new())

        affected = store.update(
            created.id,
            {"status": AppointmentStatus.COMPLETED, "tip": Decimal("12.50"), "update_reason": "done"},
        )
        updated = store.get(created.id)

        assert affected == 1
        assert updated.status == AppointmentStatus.COMPLETED
        assert updated.tip == Decimal("12.50")
        assert updated.update_reason == "done"
        assert store.update(404, {"tip": Decimal("1.00")}) == 0


def test_update_rejects_unknown_fields():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonAppointmentStore(data_dir=tmpdir)
        created = store.insert(_new())
        with pytest.raises(ValueError):
            store.update(created.id, {"colour": "blue"})


def test_booked_times_skip_cancelled_and_are_time_ordered():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonAppointmentStore(data_dir=tmpdir)
        store.insert(_new(time="5:00 PM"))
        store.insert(_new(time="2:00 PM"))
        cancelled = store.insert(_new(time="3:30 PM"))
        store.insert(_new(date="2025-08-20", time="4:00 PM"))
        store.update(cancelled.id, {"status": AppointmentStatus.CANCELLED})

        assert store.fetch_booked_times("2025-08-19") == ["2:00 PM", "5:00 PM"]


def test_appointments_survive_a_restart():
    """Test that a second store instance on the same directory sees earlier writes and keeps counting ids."""
    with tempfile.TemporaryDirectory() as tmpdir:
        JsonAppointmentStore(data_dir=tmpdir).insert(_new())

        reopened = JsonAppointmentStore(data_dir=tmpdir)
        assert [a.client for a in reopened.list_appointments()] == ["Jane Doe"]
        assert reopened.insert(_new(time="4:00 PM", client="John Smith")).id == 2


def test_search_matches_partial_name_case_insensitively():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonAppointmentStore(data_dir=tmpdir)
        created = store.insert(_new(client="Sarah Johnson"))
        store.insert(_new(time="4:00 PM", client="Sarah Johnson"))

        matches = store.search("sarah", "2:00 PM", "2025-08-19")
        assert [a.id for a in matches] == [created.id]

        store.update(created.id, {"status": AppointmentStatus.CANCELLED})
        assert store.search("sarah", "2:00 PM", "2025-08-19") == []
        assert len(store.search("sarah", "2:00 PM", "2025-08-19", AppointmentStatus.CANCELLED)) == 1


def test_listing_order_and_date_filter():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonAppointmentStore(data_dir=tmpdir)
        store.insert(_new(date="2025-08-19", time="4:00 PM", client="B"))
        store.insert(_new(date="2025-08-21", time="2:00 PM", client="C"))
        store.insert(_new(date="2025-08-19", time="2:00 PM", client="A"))

        assert [a.client for a in store.list_appointments()] == ["C", "A", "B"]
        assert [a.client for a in store.list_appointments("2025-08-19")] == ["A", "B"]


def test_file_layout():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonAppointmentStore(data_dir=tmpdir)
        store.insert(_new())

        data = json.loads((Path(tmpdir) / "appointments.json").read_text(encoding="utf-8"))
        assert data["next_id"] == 2
        assert data["version"] == 1
        assert data["appointments"][0]["payment"] == "100.00"
        assert data["appointments"][0]["category"] == "Facial"
        assert not (Path(tmpdir) / "appointments.json.tmp").exists()


def test_corrupt_file_raises_store_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "appointments.json").write_text("{not json", encoding="utf-8")
        store = JsonAppointmentStore(data_dir=tmpdir)

        with pytest.raises(StoreError):
            store.fetch_booked_times("2025-08-19")


def test_corrupt_record_raises_store_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        payload = {"next_id": 2, "appointments": [{"id": 1, "date": "2025-08-19"}], "version": 1}
        (Path(tmpdir) / "appointments.json").write_text(json.dumps(payload), encoding="utf-8")
        store = JsonAppointmentStore(data_dir=tmpdir)

        with pytest.raises(StoreError):
            store.list_appointments()
