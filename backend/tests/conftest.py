# backend/tests/conftest.py
"""
Pytest configuration for the Courtside test suite.

Every test gets its own file-backed SQLite database (so worker threads in
the concurrency tests can share it) and a fixed facility basis: UTC, 18%
tax, local resource locks.
"""

import os

# Set before any courtside import so Settings picks them up
os.environ["FACILITY_TIMEZONE"] = "UTC"
os.environ["TAX_RATE"] = "0.18"
os.environ["LOCK_BACKEND"] = "local"
os.environ["CREATE_SCHEMA_ON_STARTUP"] = "false"

from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from courtside.api.dependencies import get_db
from courtside.commands.seed import PRICING_RULES
from courtside.core.enums import RoleName
from courtside.core.resource_lock import LocalLockBackend, ResourceLockManager
from courtside.database import SessionLocal, create_all, dispose_engine, init_engine
from courtside.main import app
from courtside.models import Coach, CoachAvailabilityWindow, Court, Equipment, PricingRule
from courtside.principal import Principal
from courtside.schemas.booking import BookingCreate
from courtside.services.booking_service import BookingService


def principal_headers(principal_id: str, role: str = "user") -> Dict[str, str]:
    return {"X-Principal-Id": principal_id, "X-Principal-Role": role}


@pytest.fixture(scope="function")
def db(tmp_path):
    """Fresh database and session for each test."""
    engine = init_engine(f"sqlite:///{tmp_path / 'courtside_test.db'}")
    create_all(engine)

    session = SessionLocal()
    yield session

    session.rollback()
    session.close()
    dispose_engine()


@pytest.fixture
def session_factory(db: Session) -> Callable[[], Session]:
    """Session factory bound to the test database, for worker threads."""
    return SessionLocal


@pytest.fixture
def lock_manager() -> ResourceLockManager:
    return ResourceLockManager(LocalLockBackend(), wait_timeout_s=10.0)


@pytest.fixture
def booking_service(db: Session, lock_manager: ResourceLockManager) -> BookingService:
    return BookingService(db, lock_manager=lock_manager)


@pytest.fixture
def principal() -> Principal:
    return Principal(id="user-1")


@pytest.fixture
def other_principal() -> Principal:
    return Principal(id="user-2")


@pytest.fixture
def admin_principal() -> Principal:
    return Principal(id="admin-1", role=RoleName.ADMIN)


@pytest.fixture
def court(db: Session) -> Court:
    court = Court(
        name="Indoor Court 1",
        type="indoor",
        sport="Badminton",
        base_price_per_hour=Decimal("50"),
        description="Premium indoor badminton court",
        amenities=["LED Lighting"],
    )
    db.add(court)
    db.commit()
    return court


@pytest.fixture
def outdoor_court(db: Session) -> Court:
    court = Court(
        name="Outdoor Court 1",
        type="outdoor",
        sport="Basketball",
        base_price_per_hour=Decimal("30"),
    )
    db.add(court)
    db.commit()
    return court


@pytest.fixture
def racket(db: Session) -> Equipment:
    item = Equipment(
        name="Badminton Racket",
        category="racket",
        price_per_hour=Decimal("5"),
        total_quantity=10,
        available_quantity=10,
    )
    db.add(item)
    db.commit()
    return item


@pytest.fixture
def coach(db: Session) -> Coach:
    """Coach available Monday to Friday, 09:00-17:00."""
    coach = Coach(
        name="Coach John Smith",
        specialization="Tennis",
        price_per_hour=Decimal("40"),
        rating=Decimal("4.8"),
        experience=15,
    )
    coach.availability = [
        CoachAvailabilityWindow(position=i, day_of_week=day, start_time="09:00", end_time="17:00")
        for i, day in enumerate(range(1, 6))
    ]
    db.add(coach)
    db.commit()
    return coach


@pytest.fixture
def rules(db: Session) -> List[PricingRule]:
    """Peak Hours (x1.5), Weekend Surcharge (x1.3) and Indoor Premium (x1.2)."""
    created = [PricingRule(**data) for data in PRICING_RULES]
    db.add_all(created)
    db.commit()
    return created


@pytest.fixture
def make_request() -> Callable[..., BookingCreate]:
    def _make(
        court_id: str,
        start: datetime,
        end: datetime,
        equipment: Optional[List[tuple]] = None,
        coach_id: Optional[str] = None,
    ) -> BookingCreate:
        return BookingCreate(
            court_id=court_id,
            start_time=start,
            end_time=end,
            equipment=[{"equipment_id": eid, "quantity": qty} for eid, qty in equipment or []],
            coach_id=coach_id,
            customer_name="Test Player",
            customer_email="player@example.com",
        )

    return _make


@pytest.fixture
def client(db: Session):
    """Create a test client with the test database."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


@pytest.fixture
def user_headers() -> Dict[str, str]:
    return principal_headers("user-1")


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return principal_headers("admin-1", "admin")


@pytest.fixture
def other_headers() -> Dict[str, str]:
    return principal_headers("user-2")
