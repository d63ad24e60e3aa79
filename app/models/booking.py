"""Booking model"""

import uuid
from datetime import datetime
from sqlalchemy import (
    Column, String, Integer, Boolean, Date, DateTime, Enum, ForeignKey, Text, Uuid,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.database import Base
from app.engine.types import MealPeriod, BookingStatus


class Booking(Base):
    """Dining table and oven reservations for a single slot"""
    __tablename__ = "bookings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    unit_number = Column(Integer, nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id"))

    # Slot
    date = Column(Date, nullable=False, index=True)
    meal_period = Column(Enum(MealPeriod), nullable=False)

    # Resources
    oven_requested = Column(Boolean, default=False, nullable=False)
    # "<date>:<meal_period>" while the oven is claimed, NULL otherwise
    oven_slot = Column(String(32), unique=True)

    # Attendees
    attendees_planned = Column(Integer, nullable=False, default=1)
    attendees_final = Column(Integer)

    # Status
    status = Column(Enum(BookingStatus), nullable=False, default=BookingStatus.PENDING)

    # Concierge services
    cleaning_service_waived = Column(Boolean, default=False, nullable=False)
    cleaning_waiver_requested = Column(Boolean, default=False, nullable=False)
    fire_preparation_asked = Column(Boolean, default=False, nullable=False)
    fire_preparation_requested = Column(Boolean, default=False, nullable=False)

    notes = Column(Text)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    table_claims = relationship(
        "BookingTable",
        back_populates="booking",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="BookingTable.table_number",
    )

    @property
    def tables(self) -> list:
        return sorted(claim.table_number for claim in self.table_claims)


class BookingTable(Base):
    """One claimed table per row; the unique key stops double allocation at the storage layer"""
    __tablename__ = "booking_tables"
    __table_args__ = (
        UniqueConstraint("date", "meal_period", "table_number", name="uq_booking_tables_slot_table"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Uuid, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    meal_period = Column(Enum(MealPeriod), nullable=False)
    table_number = Column(Integer, nullable=False)

    booking = relationship("Booking", back_populates="table_claims")
