"""Blocked slot API endpoints"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.engine.permissions import Permissions
from app.schemas.blocked_slot import BlockedSlotCreate, BlockedSlotResponse
from app.services import blocks as block_service
from app.services.notifications import Notifier, get_notifier
from app.api.auth import get_permissions

router = APIRouter()


@router.get("", response_model=List[BlockedSlotResponse])
async def list_blocked_slots(
    block_date: Optional[date] = Query(None, alias="date"),
    permissions: Permissions = Depends(get_permissions),
    db: AsyncSession = Depends(get_db),
):
    """List blocked slots, optionally for a single date"""
    return await block_service.list_blocks(db, block_date)


@router.post("", response_model=BlockedSlotResponse, status_code=201)
async def create_blocked_slot(
    block_data: BlockedSlotCreate,
    permissions: Permissions = Depends(get_permissions),
    notifier: Notifier = Depends(get_notifier),
    db: AsyncSession = Depends(get_db),
):
    """Block a slot for a community meeting"""
    return await block_service.create_block(db, permissions, block_data, notifier)


@router.delete("/{block_id}", status_code=204)
async def delete_blocked_slot(
    block_id: UUID,
    permissions: Permissions = Depends(get_permissions),
    db: AsyncSession = Depends(get_db),
):
    """Remove a blocked slot"""
    await block_service.delete_block(db, permissions, block_id)
