"""
Equipment model.

``available_quantity`` is the rentable stock. Only the booking coordinator
changes it (decrement on create, increment on cancel); the database
enforces ``0 <= available_quantity <= total_quantity`` on every write.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, Numeric, String, Text

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import TimestampMixin


class Equipment(TimestampMixin, Base):
    __tablename__ = "equipment"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    name = Column(String(120), nullable=False, unique=True)
    category = Column(String(30), nullable=False)
    price_per_hour = Column(Numeric(10, 2), nullable=False)
    total_quantity = Column(Integer, nullable=False, default=0)
    available_quantity = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    description = Column(Text, nullable=False, default="")

    __table_args__ = (
        CheckConstraint(
            "category IN ('racket', 'shoes', 'ball', 'protective_gear', 'other')",
            name="ck_equipment_category",
        ),
        CheckConstraint("price_per_hour >= 0", name="ck_equipment_price_non_negative"),
        CheckConstraint("total_quantity >= 0", name="ck_equipment_total_non_negative"),
        CheckConstraint("available_quantity >= 0", name="ck_equipment_available_non_negative"),
        CheckConstraint(
            "available_quantity <= total_quantity", name="ck_equipment_available_within_total"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Equipment {self.id}: {self.name} "
            f"{self.available_quantity}/{self.total_quantity}>"
        )
