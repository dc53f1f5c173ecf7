"""
Pricing rule model.

``applicable_conditions`` holds four optional facets; an empty facet places
no restriction:

    {
        "court_types": ["indoor"],
        "days_of_week": [0, 6],
        "time_ranges": [{"start": "18:00", "end": "21:00"}],
        "date_ranges": [{"start": "2026-06-01", "end": "2026-08-31"}],
    }

``priority`` only orders rules for display; multipliers stack by
multiplication, so evaluation order never changes the price.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, JSON, Numeric, String, Text

from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import TimestampMixin


def empty_conditions() -> dict:
    return {"court_types": [], "days_of_week": [], "time_ranges": [], "date_ranges": []}


class PricingRule(TimestampMixin, Base):
    __tablename__ = "pricing_rules"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    name = Column(String(120), nullable=False, unique=True)
    description = Column(Text, nullable=False, default="")
    rule_type = Column(String(30), nullable=False)
    multiplier = Column(Numeric(6, 3), nullable=False, default=1)
    applicable_conditions = Column(JSON, nullable=False, default=empty_conditions)
    priority = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    __table_args__ = (
        CheckConstraint(
            "rule_type IN ('peak_hour', 'weekend', 'indoor_premium', 'seasonal', 'custom')",
            name="ck_pricing_rules_type",
        ),
        CheckConstraint("multiplier >= 0", name="ck_pricing_rules_multiplier_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<PricingRule {self.name} x{self.multiplier} active={self.is_active}>"
