"""Authentication schemas"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr

from app.models.user import UserRole


class Token(BaseModel):
    """JWT token pair issued on login and refresh"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class RefreshRequest(BaseModel):
    refresh_token: str


class UserResponse(BaseModel):
    """Authenticated resident or staff member"""
    id: UUID
    email: EmailStr
    full_name: Optional[str]
    role: UserRole
    unit_number: Optional[int]
    is_active: bool
    last_login: Optional[datetime]

    class Config:
        from_attributes = True


class MeResponse(UserResponse):
    """Current user with the capabilities their role grants"""
    capabilities: List[str]
