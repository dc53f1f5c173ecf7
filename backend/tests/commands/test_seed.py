# backend/tests/commands/test_seed.py
from datetime import datetime, timezone
from decimal import Decimal

from courtside.commands.seed import seed
from courtside.models import Coach, Court, Equipment, PricingRule
from courtside.services.pricing_service import PricingService


def test_seed_is_idempotent(db):
    first = seed(db)
    db.commit()
    second = seed(db)
    db.commit()

    assert first == {"courts": 4, "equipment": 4, "coaches": 3, "pricing_rules": 3}
    assert second == {"courts": 0, "equipment": 0, "coaches": 0, "pricing_rules": 0}
    assert db.query(Court).count() == 4


def test_seeded_data_is_consistent(db):
    seed(db)
    db.commit()

    for item in db.query(Equipment).all():
        assert item.available_quantity == item.total_quantity

    john = db.query(Coach).filter_by(name="Coach John Smith").one()
    assert sorted(w.day_of_week for w in john.availability) == [1, 2, 3, 4, 5]
    assert {r.name for r in db.query(PricingRule).all()} == {
        "Peak Hours",
        "Weekend Surcharge",
        "Indoor Premium",
    }


def test_seeded_rules_price_the_reference_booking(db):
    seed(db)
    db.commit()
    court = db.query(Court).filter_by(name="Indoor Court 1").one()

    price = PricingService(db).calculate_price(
        court.id,
        datetime(2030, 6, 15, 18, tzinfo=timezone.utc),
        datetime(2030, 6, 15, 20, tzinfo=timezone.utc),
    )

    assert price.total_price == Decimal("276.12")
