"""Administrative block management"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.engine.blocking import check_block_conflict
from app.engine.calendar_rules import normalize_day
from app.engine.errors import BlockConflict, NotFound, PermissionDenied
from app.engine.permissions import Capability, Permissions
from app.engine.types import BlockMealPeriod, enum_value
from app.models.blocked_slot import BlockedSlot
from app.schemas.blocked_slot import BlockedSlotCreate
from app.services.activity import record_activity
from app.services.bookings import load_blocks
from app.services.notifications import FIRE_BLOCK_CREATED, Notifier, dispatch

logger = structlog.get_logger()


def _ensure_can_manage(permissions: Permissions) -> None:
    if not permissions.has(Capability.MANAGE_BLOCKS):
        raise PermissionDenied("You don't have permission to manage blocked slots")


async def list_blocks(db: AsyncSession, block_date: Optional[date] = None) -> List[BlockedSlot]:
    query = select(BlockedSlot)
    if block_date is not None:
        query = query.where(BlockedSlot.date == normalize_day(block_date))
    result = await db.execute(query.order_by(BlockedSlot.date))
    return list(result.scalars().all())


async def create_block(
    db: AsyncSession,
    permissions: Permissions,
    draft: BlockedSlotCreate,
    notifier: Notifier,
) -> BlockedSlot:
    """Block a date's meal periods unless another block already covers them"""
    _ensure_can_manage(permissions)
    block_date = normalize_day(draft.date)
    meal_period = BlockMealPeriod(draft.meal_period)

    try:
        check_block_conflict(await load_blocks(db, block_date), meal_period)
    except BlockConflict as e:
        logger.warning("Block conflict", date=block_date.isoformat(), **e.details)
        raise

    block = BlockedSlot(
        date=block_date,
        meal_period=meal_period,
        reason=draft.reason,
        fire_preparation_prepared=bool(draft.fire_preparation_prepared),
        created_by=permissions.actor_id,
    )
    db.add(block)
    await db.commit()

    logger.info(
        "Block created",
        block_id=str(block.id),
        date=block_date.isoformat(),
        meal_period=meal_period.value,
    )

    fire_detail = " with fire preparation" if block.fire_preparation_prepared else ""
    await record_activity(
        db,
        "create",
        f"Blocked {meal_period.value} on {block_date.isoformat()} "
        f"for {enum_value(block.reason)}{fire_detail}",
        actor_id=permissions.actor_id,
    )

    if block.fire_preparation_prepared:
        dispatch(notifier, FIRE_BLOCK_CREATED, {
            "block_id": str(block.id),
            "date": block_date.isoformat(),
            "meal_period": meal_period.value,
            "reason": enum_value(block.reason),
        })

    return block


async def delete_block(db: AsyncSession, permissions: Permissions, block_id: UUID) -> None:
    """Remove a block; bookings made meanwhile are left untouched"""
    _ensure_can_manage(permissions)
    result = await db.execute(select(BlockedSlot).where(BlockedSlot.id == block_id))
    block = result.scalar_one_or_none()
    if block is None:
        raise NotFound("Blocked slot not found", block_id=str(block_id))

    summary = (
        f"Removed block of {enum_value(block.meal_period)} on {block.date.isoformat()} "
        f"({enum_value(block.reason)})"
    )
    await db.delete(block)
    await db.commit()

    logger.info("Block deleted", block_id=str(block_id))
    await record_activity(db, "delete", summary, actor_id=permissions.actor_id)
