"""
Coach model with weekly availability windows.

Windows are facility-local wall clock ranges ("HH:MM") per day of week
(0 = Sunday). A day may carry several windows.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import TimestampMixin


class Coach(TimestampMixin, Base):
    __tablename__ = "coaches"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    name = Column(String(120), nullable=False)
    specialization = Column(String(60), nullable=False)
    price_per_hour = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    bio = Column(Text, nullable=False, default="")
    experience = Column(Integer, nullable=False, default=0)
    rating = Column(Numeric(2, 1), nullable=False, default=0)

    availability = relationship(
        "CoachAvailabilityWindow",
        back_populates="coach",
        order_by="CoachAvailabilityWindow.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("price_per_hour >= 0", name="ck_coaches_price_non_negative"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_coaches_rating_range"),
        CheckConstraint("experience >= 0", name="ck_coaches_experience_non_negative"),
    )

    def windows_for_day(self, day: int) -> list["CoachAvailabilityWindow"]:
        return [window for window in self.availability if window.day_of_week == day]

    def __repr__(self) -> str:
        return f"<Coach {self.id}: {self.name} ({self.specialization})>"


class CoachAvailabilityWindow(Base):
    __tablename__ = "coach_availability_windows"

    id = Column(Integer, primary_key=True, autoincrement=True)
    coach_id = Column(String(26), ForeignKey("coaches.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)

    coach = relationship("Coach", back_populates="availability")

    __table_args__ = (
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_coach_window_day"),
        CheckConstraint("start_time < end_time", name="ck_coach_window_order"),
    )

    def __repr__(self) -> str:
        return f"<CoachAvailabilityWindow day={self.day_of_week} {self.start_time}-{self.end_time}>"
