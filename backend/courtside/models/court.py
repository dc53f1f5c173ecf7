"""
Court model.

Reference data managed by admins; courts are deactivated rather than deleted.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Index, Integer, JSON, Numeric, String, Text

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import TimestampMixin


class Court(TimestampMixin, Base):
    __tablename__ = "courts"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    name = Column(String(120), nullable=False, unique=True)
    type = Column(String(20), nullable=False)
    sport = Column(String(60), nullable=False)
    base_price_per_hour = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    capacity = Column(Integer, nullable=False, default=1)
    description = Column(Text, nullable=False, default="")
    amenities = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        CheckConstraint("type IN ('indoor', 'outdoor')", name="ck_courts_type"),
        CheckConstraint("base_price_per_hour >= 0", name="ck_courts_price_non_negative"),
        CheckConstraint("capacity >= 1", name="ck_courts_capacity_positive"),
        Index("ix_courts_type_active", "type", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Court {self.id}: {self.name} ({self.type})>"
