"""Billing export API endpoints"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.engine.permissions import Permissions
from app.schemas.billing import UnitSummaryResponse
from app.services.billing import export_billing
from app.api.auth import get_permissions

router = APIRouter()


@router.get("/billing", response_model=List[UnitSummaryResponse])
async def billing_export(
    year: int = Query(...),
    permissions: Permissions = Depends(get_permissions),
    db: AsyncSession = Depends(get_db),
):
    """Per-unit billing summary of confirmed bookings for a year"""
    return await export_billing(db, permissions, year)
