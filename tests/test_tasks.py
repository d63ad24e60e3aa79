"""Tests for concierge notification jobs"""

import pytest
from sqlalchemy import select

from app.jobs import tasks
from app.models.notification import NotificationLog


def test_fire_block_message():
    title, body, tag = tasks.build_message(
        "fire-block-created",
        {
            "block_id": "b-1",
            "date": "2025-02-03",
            "meal_period": "both",
            "reason": "extraordinary_general_meeting",
        },
    )

    assert title == "Booking for Extraordinary general meeting"
    assert body == "2025-02-03 · lunch and dinner · with fire preparation"
    assert tag == "blocked-slot-b-1"


def test_concierge_service_message():
    title, body, tag = tasks.build_message(
        "concierge-service-needed",
        {
            "booking_id": "x-9",
            "unit_number": 12,
            "date": "2025-01-20",
            "meal_period": "evening",
            "tables": [1, 2],
            "fire_preparation": True,
            "oven": True,
        },
    )

    assert title == "Unit #12 needs concierge service"
    assert body == "2025-01-20 · dinner · tables 1, 2 · fire preparation and oven"
    assert tag == "booking-x-9"


@pytest.mark.asyncio
async def test_record_notification(test_db):
    await tasks.record_notification(
        test_db,
        "concierge-service-needed",
        {"booking_id": "x-1", "unit_number": 4, "date": "2025-01-20", "meal_period": "midday", "tables": [6]},
    )

    result = await test_db.execute(select(NotificationLog))
    entry = result.scalar_one()
    assert entry.event == "concierge-service-needed"
    assert entry.body == "2025-01-20 · lunch · tables 6 · no extras"
    assert entry.sent_at is not None


def test_sms_skipped_without_twilio(monkeypatch):
    monkeypatch.setattr(tasks.settings, "twilio_account_sid", "")

    def fail(*args, **kwargs):
        raise AssertionError("Twilio client should not be created")

    monkeypatch.setattr("twilio.rest.Client", fail)

    tasks.send_concierge_sms("Unit #4 needs concierge service")
