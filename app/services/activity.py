"""Best-effort activity log"""

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.engine.types import enum_value
from app.models.audit import ActivityLog

logger = structlog.get_logger()


def describe_services(
    fire_preparation: bool = False,
    oven: bool = False,
    cleaning_waived: bool = False,
    rest_day: bool = False,
) -> str:
    """Suffix such as ' with fire preparation and oven reservation'"""
    parts: List[str] = []
    if fire_preparation:
        parts.append("fire preparation")
    if oven:
        parts.append("oven reservation")
    if cleaning_waived:
        parts.append("no cleaning service (concierge rest day)" if rest_day else "no cleaning service")
    if not parts:
        return ""
    return " with " + " and ".join(parts)


def describe_slot(booking_date, meal_period, tables) -> str:
    table_list = ", ".join(str(t) for t in tables)
    return f"tables {table_list} for {enum_value(meal_period)} on {booking_date.isoformat()}"


async def record_activity(
    db: AsyncSession,
    action: str,
    details: str,
    actor_id=None,
    unit_number: Optional[int] = None,
) -> Optional[ActivityLog]:
    """Append an activity entry; failures are logged and never propagated"""
    entry = ActivityLog(
        action=action,
        details=details,
        actor_id=actor_id,
        unit_number=unit_number,
    )
    # Own session, so a failed append leaves the caller's session and objects untouched
    async with AsyncSession(bind=db.bind, expire_on_commit=False) as audit_db:
        try:
            audit_db.add(entry)
            await audit_db.commit()
        except SQLAlchemyError as e:
            await audit_db.rollback()
            logger.error("Failed to record activity", action=action, error=str(e))
            return None
    return entry
