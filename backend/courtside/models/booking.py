# backend/courtside/models/booking.py
"""
Booking model for the Courtside platform.

A booking is a self-contained record: the court interval, the rented
equipment lines, the coach and every price are copied onto the booking
when it is created, so later edits to the price lists never alter
historical bookings.
"""

from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    JSON,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import TimestampMixin, UTCDateTime


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"  # Reserved for a future hold feature
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


OCCUPYING_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.PENDING.value)


class Booking(TimestampMixin, Base):
    """
    Court reservation with optional equipment rental and coach.

    Only the booking coordinator creates bookings; afterwards the status is
    the only column that changes (confirmed -> cancelled).
    """

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    user_id = Column(String(64), nullable=False)
    court_id = Column(String(26), ForeignKey("courts.id"), nullable=False)
    start_time = Column(UTCDateTime(), nullable=False)
    end_time = Column(UTCDateTime(), nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value)

    # Coach snapshot
    coach_id = Column(String(26), ForeignKey("coaches.id"), nullable=True)
    coach_price_per_hour = Column(Numeric(10, 2), nullable=True)

    # Pricing breakdown
    court_base_price = Column(Numeric(12, 2), nullable=False)
    court_multiplier = Column(Numeric(12, 6), nullable=False)
    court_price = Column(Numeric(12, 2), nullable=False)
    equipment_price = Column(Numeric(12, 2), nullable=False, default=0)
    coach_price = Column(Numeric(12, 2), nullable=False, default=0)
    subtotal = Column(Numeric(12, 2), nullable=False)
    tax = Column(Numeric(12, 2), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)
    applied_rules = Column(JSON, nullable=False, default=list)

    # Customer snapshot
    customer_name = Column(String(120), nullable=False, default="")
    customer_email = Column(String(254), nullable=False, default="")
    customer_phone = Column(String(40), nullable=False, default="")

    court = relationship("Court", lazy="joined")
    coach = relationship("Coach", lazy="joined")
    equipment_lines = relationship(
        "BookingEquipment",
        back_populates="booking",
        order_by="BookingEquipment.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_bookings_time_order"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name="ck_bookings_status",
        ),
        CheckConstraint("total_price >= 0", name="ck_bookings_total_non_negative"),
        Index("ix_bookings_court_interval", "court_id", "start_time", "end_time"),
        Index("ix_bookings_coach_interval", "coach_id", "start_time", "end_time"),
        Index("ix_bookings_user_created", "user_id", "created_at"),
        Index("ix_bookings_status", "status"),
    )

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED.value

    def cancel(self) -> None:
        self.status = BookingStatus.CANCELLED.value

    def __repr__(self) -> str:
        return f"<Booking {self.id}: court={self.court_id} {self.start_time}-{self.end_time} {self.status}>"


class BookingEquipment(Base):
    """One rented equipment line on a booking, with its price snapshot."""

    __tablename__ = "booking_equipment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(String(26), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
    equipment_id = Column(String(26), ForeignKey("equipment.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    quantity = Column(Integer, nullable=False)
    price_per_hour = Column(Numeric(10, 2), nullable=False)

    booking = relationship("Booking", back_populates="equipment_lines")
    equipment = relationship("Equipment", lazy="joined")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_booking_equipment_quantity_positive"),
        Index("ix_booking_equipment_booking", "booking_id"),
        Index("ix_booking_equipment_equipment", "equipment_id"),
    )

    def __repr__(self) -> str:
        return f"<BookingEquipment {self.equipment_id} x{self.quantity}>"
