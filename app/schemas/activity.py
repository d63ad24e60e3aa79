"""Activity log schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel


class ActivityResponse(BaseModel):
    """Activity log entry"""
    id: UUID
    action: str
    unit_number: Optional[int]
    actor_id: Optional[UUID]
    details: str
    created_at: datetime

    class Config:
        from_attributes = True


class ActivityListResponse(BaseModel):
    """Paginated activity log"""
    items: List[ActivityResponse]
    total: int
    page: int
    page_size: int
