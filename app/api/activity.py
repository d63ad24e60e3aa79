"""Activity log API endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.engine.permissions import Capability, Permissions
from app.models.audit import ActivityLog
from app.schemas.activity import ActivityListResponse
from app.api.auth import require_capability

router = APIRouter()


@router.get("", response_model=ActivityListResponse)
async def list_activity(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    action: Optional[str] = None,
    unit: Optional[int] = None,
    permissions: Permissions = Depends(require_capability(Capability.VIEW_ALL)),
    db: AsyncSession = Depends(get_db),
):
    """List activity log entries, newest first"""
    query = select(ActivityLog)
    count_query = select(func.count(ActivityLog.id))

    if action:
        query = query.where(ActivityLog.action == action)
        count_query = count_query.where(ActivityLog.action == action)

    if unit is not None:
        query = query.where(ActivityLog.unit_number == unit)
        count_query = count_query.where(ActivityLog.unit_number == unit)

    # Get total
    total_result = await db.execute(count_query)
    total = total_result.scalar()

    # Get paginated results
    offset = (page - 1) * page_size
    query = query.order_by(ActivityLog.created_at.desc()).offset(offset).limit(page_size)

    result = await db.execute(query)
    entries = result.scalars().all()

    return ActivityListResponse(
        items=entries,
        total=total,
        page=page,
        page_size=page_size,
    )
