# backend/courtside/repositories/equipment_repository.py
"""
Equipment Repository.

Inventory changes are conditional ``UPDATE`` statements so that
``available_quantity`` cannot leave ``[0, total_quantity]`` whatever the
interleaving of concurrent writers.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.equipment import Equipment
from .base_repository import BaseRepository


class EquipmentRepository(BaseRepository[Equipment]):
    def __init__(self, db: Session):
        super().__init__(db, Equipment)
        self.logger = logging.getLogger(__name__)

    def list_equipment(
        self, active: Optional[bool] = None, category: Optional[str] = None
    ) -> List[Equipment]:
        try:
            query = self.db.query(Equipment)
            if active is not None:
                query = query.filter(Equipment.is_active.is_(active))
            if category:
                query = query.filter(Equipment.category == category)
            return query.order_by(Equipment.name).all()
        except SQLAlchemyError as exc:
            self.logger.error("Error listing equipment: %s", exc)
            raise RepositoryException(f"Failed to list equipment: {exc}") from exc

    def get_many(self, ids: Iterable[str], for_update: bool = False) -> dict[str, Equipment]:
        """
        Load equipment rows by id.

        With ``for_update`` the rows are locked (``SELECT ... FOR UPDATE``) on
        dialects that support row locks.
        """
        wanted = sorted(set(ids))
        if not wanted:
            return {}
        try:
            query = self.db.query(Equipment).filter(Equipment.id.in_(wanted)).order_by(Equipment.id)
            if for_update and self.row_locks_enabled:
                query = query.with_for_update()
            return {item.id: item for item in query.all()}
        except SQLAlchemyError as exc:
            self.logger.error("Error loading equipment %s: %s", wanted, exc)
            raise RepositoryException(f"Failed to load equipment: {exc}") from exc

    def decrement_available(self, equipment_id: str, quantity: int) -> bool:
        """Take ``quantity`` units out of stock; False if stock would go negative."""
        stmt = (
            update(Equipment)
            .where(Equipment.id == equipment_id, Equipment.available_quantity >= quantity)
            .values(available_quantity=Equipment.available_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        return self._apply_stock_change(stmt, equipment_id, -quantity)

    def increment_available(self, equipment_id: str, quantity: int) -> bool:
        """Return ``quantity`` units to stock; False if stock would exceed the total."""
        stmt = (
            update(Equipment)
            .where(
                Equipment.id == equipment_id,
                Equipment.available_quantity + quantity <= Equipment.total_quantity,
            )
            .values(available_quantity=Equipment.available_quantity + quantity)
            .execution_options(synchronize_session=False)
        )
        return self._apply_stock_change(stmt, equipment_id, quantity)

    def _apply_stock_change(self, stmt, equipment_id: str, delta: int) -> bool:
        try:
            result = self.db.execute(stmt)
        except SQLAlchemyError as exc:
            self.logger.error("Error changing stock of %s by %d: %s", equipment_id, delta, exc)
            raise RepositoryException(f"Failed to update equipment stock: {exc}") from exc
        changed = result.rowcount == 1
        if changed:
            item = self.db.get(Equipment, equipment_id)
            if item is not None:
                self.db.expire(item, ["available_quantity"])
        return changed
