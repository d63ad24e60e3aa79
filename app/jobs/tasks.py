"""Background job tasks"""

from datetime import datetime
from typing import Any, Dict, Tuple
import asyncio
import structlog

from app.jobs.celery_app import celery_app
from app.config import settings

logger = structlog.get_logger()

MEAL_LABELS = {"midday": "lunch", "evening": "dinner", "both": "lunch and dinner"}
REASON_LABELS = {
    "ordinary_general_meeting": "Ordinary general meeting",
    "extraordinary_general_meeting": "Extraordinary general meeting",
}


def run_async(coro):
    """Helper to run async functions in sync context"""
    return asyncio.run(coro)


def build_message(event: str, payload: Dict[str, Any]) -> Tuple[str, str, str]:
    """Title, body and tag shown to the concierge"""
    meal = MEAL_LABELS.get(payload.get("meal_period"), payload.get("meal_period", ""))
    day = payload.get("date", "")

    if event == "fire-block-created":
        reason = REASON_LABELS.get(payload.get("reason"), payload.get("reason", ""))
        return (
            f"Booking for {reason}",
            f"{day} · {meal} · with fire preparation",
            f"blocked-slot-{payload.get('block_id', '')}",
        )

    services = []
    if payload.get("fire_preparation"):
        services.append("fire preparation")
    if payload.get("oven"):
        services.append("oven")
    tables = ", ".join(str(t) for t in payload.get("tables", []))
    return (
        f"Unit #{payload.get('unit_number')} needs concierge service",
        f"{day} · {meal} · tables {tables} · {' and '.join(services) or 'no extras'}",
        f"booking-{payload.get('booking_id', '')}",
    )


async def record_notification(db, event: str, payload: Dict[str, Any]):
    """Persist a notification log entry"""
    from app.models.notification import NotificationLog

    title, body, tag = build_message(event, payload)
    entry = NotificationLog(event=event, title=title, body=body, tag=tag, sent_at=datetime.utcnow())
    db.add(entry)
    await db.commit()
    return entry


def send_concierge_sms(body: str) -> None:
    """Text the concierge when Twilio is configured"""
    if not (settings.twilio_account_sid and settings.concierge_phone_number):
        return

    from twilio.rest import Client as TwilioClient

    client = TwilioClient(settings.twilio_account_sid, settings.twilio_auth_token)
    client.messages.create(
        body=body,
        from_=settings.twilio_phone_number,
        to=settings.concierge_phone_number,
    )


@celery_app.task(name="deliver_notification")
def deliver_notification(event: str, payload: Dict[str, Any]):
    """Record and deliver a concierge notification"""
    logger.info("Delivering notification", notification_event=event)

    async def _deliver():
        from app.database import SessionLocal

        async with SessionLocal() as db:
            entry = await record_notification(db, event, payload)

        try:
            send_concierge_sms(f"{entry.title}: {entry.body}")
        except Exception as e:
            logger.error(
                "Failed to send concierge SMS",
                notification_event=event,
                error=str(e),
            )

    run_async(_deliver())
