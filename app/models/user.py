"""User model for resident and staff authentication"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Enum, Uuid
import enum

from app.database import Base


class UserRole(str, enum.Enum):
    """User roles for RBAC"""
    RESIDENT = "resident"
    ADMIN = "admin"
    IT_ADMIN = "it_admin"
    MANAGER = "manager"
    CONCIERGE = "concierge"


class User(Base):
    """Residents and community staff"""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Authentication
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # Profile
    full_name = Column(String(255))
    unit_number = Column(Integer)  # Only set for residents

    # Role
    role = Column(Enum(UserRole), default=UserRole.RESIDENT)

    # Status
    is_active = Column(Boolean, default=True)

    # Tokens
    refresh_token = Column(String(500))

    # Timestamps
    last_login = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
