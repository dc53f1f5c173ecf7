#!/usr/bin/env python
# backend/courtside/commands/seed.py
"""
Seed the booking store with demo courts, equipment, coaches and the
canonical pricing rules.

Coach windows are facility-local wall clock times.

Usage:
    python -m courtside.commands.seed            # insert missing demo data
    python -m courtside.commands.seed --reset    # drop and recreate every table first
"""

import argparse
from decimal import Decimal
import logging
import sys
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ..core.config import settings
from ..database import Base, create_all, get_db_session, init_engine
from ..models import Coach, CoachAvailabilityWindow, Court, Equipment, PricingRule

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

WEEKDAYS = [1, 2, 3, 4, 5]

COURTS: List[Dict[str, Any]] = [
    {
        "name": "Indoor Court 1",
        "type": "indoor",
        "sport": "Badminton",
        "base_price_per_hour": Decimal("50"),
        "description": "Premium indoor badminton court with wooden flooring",
        "amenities": ["Air Conditioning", "LED Lighting", "Spectator Seating"],
    },
    {
        "name": "Indoor Court 2",
        "type": "indoor",
        "sport": "Tennis",
        "base_price_per_hour": Decimal("60"),
        "description": "Professional indoor tennis court",
        "amenities": ["Air Conditioning", "High Ceiling", "Professional Net"],
    },
    {
        "name": "Outdoor Court 1",
        "type": "outdoor",
        "sport": "Basketball",
        "base_price_per_hour": Decimal("30"),
        "description": "Full-size outdoor basketball court",
        "amenities": ["Floodlights", "Scoreboard"],
    },
    {
        "name": "Outdoor Court 2",
        "type": "outdoor",
        "sport": "Tennis",
        "base_price_per_hour": Decimal("35"),
        "description": "Outdoor tennis court with synthetic grass",
        "amenities": ["Floodlights", "Seating Area"],
    },
]

EQUIPMENT: List[Dict[str, Any]] = [
    {"name": "Badminton Racket", "category": "racket", "price_per_hour": Decimal("5"), "total_quantity": 10},
    {"name": "Tennis Racket", "category": "racket", "price_per_hour": Decimal("8"), "total_quantity": 8},
    {"name": "Sports Shoes", "category": "shoes", "price_per_hour": Decimal("10"), "total_quantity": 15},
    {"name": "Basketball", "category": "ball", "price_per_hour": Decimal("3"), "total_quantity": 5},
]

COACHES: List[Dict[str, Any]] = [
    {
        "name": "Coach John Smith",
        "specialization": "Tennis",
        "price_per_hour": Decimal("40"),
        "windows": [(day, "09:00", "17:00") for day in WEEKDAYS],
        "bio": "Former professional tennis player with 15 years coaching experience",
        "experience": 15,
        "rating": Decimal("4.8"),
    },
    {
        "name": "Coach Sarah Johnson",
        "specialization": "Badminton",
        "price_per_hour": Decimal("35"),
        "windows": [(day, "10:00", "18:00") for day in (1, 2, 3, 5)] + [(6, "08:00", "14:00")],
        "bio": "National badminton champion and certified coach",
        "experience": 10,
        "rating": Decimal("4.9"),
    },
    {
        "name": "Coach Mike Davis",
        "specialization": "Basketball",
        "price_per_hour": Decimal("45"),
        "windows": [(2, "14:00", "20:00"), (4, "14:00", "20:00"), (6, "09:00", "17:00"), (0, "09:00", "15:00")],
        "bio": "College basketball coach with expertise in skill development",
        "experience": 12,
        "rating": Decimal("4.7"),
    },
]


def _conditions(**facets: Any) -> Dict[str, Any]:
    conditions: Dict[str, Any] = {"court_types": [], "days_of_week": [], "time_ranges": [], "date_ranges": []}
    conditions.update(facets)
    return conditions


PRICING_RULES: List[Dict[str, Any]] = [
    {
        "name": "Peak Hours",
        "description": "50% increase during peak hours (6 PM - 9 PM)",
        "rule_type": "peak_hour",
        "multiplier": Decimal("1.5"),
        "applicable_conditions": _conditions(time_ranges=[{"start": "18:00", "end": "21:00"}]),
        "priority": 10,
    },
    {
        "name": "Weekend Surcharge",
        "description": "30% increase on weekends",
        "rule_type": "weekend",
        "multiplier": Decimal("1.3"),
        "applicable_conditions": _conditions(days_of_week=[0, 6]),
        "priority": 5,
    },
    {
        "name": "Indoor Premium",
        "description": "20% premium for indoor courts",
        "rule_type": "indoor_premium",
        "multiplier": Decimal("1.2"),
        "applicable_conditions": _conditions(court_types=["indoor"]),
        "priority": 3,
    },
]


def seed(db: Session) -> Dict[str, int]:
    """Insert every demo record whose name is not already present."""
    created = {"courts": 0, "equipment": 0, "coaches": 0, "pricing_rules": 0}

    for data in COURTS:
        if db.query(Court).filter_by(name=data["name"]).first() is None:
            db.add(Court(**data))
            created["courts"] += 1

    for data in EQUIPMENT:
        if db.query(Equipment).filter_by(name=data["name"]).first() is None:
            db.add(Equipment(available_quantity=data["total_quantity"], **data))
            created["equipment"] += 1

    for data in COACHES:
        if db.query(Coach).filter_by(name=data["name"]).first() is None:
            fields = {key: value for key, value in data.items() if key != "windows"}
            coach = Coach(**fields)
            coach.availability = [
                CoachAvailabilityWindow(position=i, day_of_week=day, start_time=start, end_time=end)
                for i, (day, start, end) in enumerate(data["windows"])
            ]
            db.add(coach)
            created["coaches"] += 1

    for data in PRICING_RULES:
        if db.query(PricingRule).filter_by(name=data["name"]).first() is None:
            db.add(PricingRule(**data))
            created["pricing_rules"] += 1

    db.flush()
    return created


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the Courtside booking store with demo data")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    args = parser.parse_args(argv)

    engine = init_engine(args.database_url or settings.database_url)
    if args.reset:
        logger.warning("Dropping all tables on %s", engine.url.render_as_string(hide_password=True))
        from .. import models  # noqa: F401  (register mappers)

        Base.metadata.drop_all(bind=engine)
    create_all(engine)

    with get_db_session() as db:
        created = seed(db)
    logger.info("Seed complete: %s", ", ".join(f"{k}={v}" for k, v in created.items()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
