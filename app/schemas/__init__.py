"""Pydantic schemas for request/response validation"""

from app.schemas.auth import (
    Token,
    RefreshRequest,
    UserResponse,
)
from app.schemas.booking import (
    BookingCreate,
    BookingUpdate,
    BookingConfirm,
    BookingResponse,
    AvailabilityResponse,
)
from app.schemas.blocked_slot import (
    BlockedSlotCreate,
    BlockedSlotResponse,
)
from app.schemas.billing import (
    BillingLineResponse,
    UnitSummaryResponse,
)
from app.schemas.activity import (
    ActivityResponse,
    ActivityListResponse,
)

__all__ = [
    "Token",
    "RefreshRequest",
    "UserResponse",
    "BookingCreate",
    "BookingUpdate",
    "BookingConfirm",
    "BookingResponse",
    "AvailabilityResponse",
    "BlockedSlotCreate",
    "BlockedSlotResponse",
    "BillingLineResponse",
    "UnitSummaryResponse",
    "ActivityResponse",
    "ActivityListResponse",
]
