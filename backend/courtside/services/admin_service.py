# backend/courtside/services/admin_service.py
"""
Admin Service: pricing rule management and resource activation.

Every write runs in its own transaction scope.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.enums import ResourceKind
from ..core.exceptions import BusinessRuleException, ConflictException, NotFoundException
from ..core.resource_lock import ResourceLockManager, get_lock_manager, resource_key
from ..models.coach import Coach
from ..models.court import Court
from ..models.equipment import Equipment
from ..models.pricing_rule import PricingRule
from ..repositories import BaseRepository, RepositoryFactory
from ..schemas.resources import EquipmentStockUpdate, PricingRuleCreate, PricingRuleUpdate
from .base import BaseService

logger = logging.getLogger(__name__)


class AdminService(BaseService):
    def __init__(self, db: Session, lock_manager: Optional[ResourceLockManager] = None):
        super().__init__(db)
        self.lock_manager = lock_manager or get_lock_manager()
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.rule_repository = RepositoryFactory.create_pricing_rule_repository(db)
        self.court_repository = RepositoryFactory.create_court_repository(db)
        self.equipment_repository = RepositoryFactory.create_equipment_repository(db)
        self.coach_repository = RepositoryFactory.create_coach_repository(db)

    # Pricing rules

    def list_rules(self) -> List[PricingRule]:
        return self.rule_repository.list_rules()

    def _get_rule(self, rule_id: str) -> PricingRule:
        rule = self.rule_repository.get_by_id(rule_id)
        if rule is None:
            raise NotFoundException(
                "Pricing rule not found", code="RULE_NOT_FOUND", details={"rule_id": rule_id}
            )
        return rule

    def _ensure_unique_name(self, name: str, rule_id: Optional[str] = None) -> None:
        existing = self.rule_repository.find_one_by(name=name)
        if existing is not None and existing.id != rule_id:
            raise ConflictException(
                f"A pricing rule named '{name}' already exists",
                code="DUPLICATE_RULE_NAME",
                details={"name": name},
            )

    @BaseService.measure_operation("create_rule")
    def create_rule(self, data: PricingRuleCreate) -> PricingRule:
        with self.transaction():
            self._ensure_unique_name(data.name)
            rule = self.rule_repository.create(
                name=data.name,
                description=data.description,
                rule_type=data.rule_type.value,
                multiplier=data.multiplier,
                applicable_conditions=data.applicable_conditions.to_storage(),
                priority=data.priority,
                is_active=data.is_active,
            )
            rule_id = rule.id
        self.log_operation("create_rule", rule_id=rule_id, rule_name=data.name)
        return self._get_rule(rule_id)

    @BaseService.measure_operation("update_rule")
    def update_rule(self, rule_id: str, data: PricingRuleUpdate) -> PricingRule:
        changes = data.model_dump(exclude_unset=True)
        with self.transaction():
            self._get_rule(rule_id)
            if changes.get("name") is not None:
                self._ensure_unique_name(changes["name"], rule_id)
            if "rule_type" in changes and data.rule_type is not None:
                changes["rule_type"] = data.rule_type.value
            if "applicable_conditions" in changes:
                conditions = data.applicable_conditions
                changes["applicable_conditions"] = (
                    conditions.to_storage() if conditions is not None else {}
                )
            updates = {key: value for key, value in changes.items() if value is not None}
            self.rule_repository.update(rule_id, **updates)
        self.log_operation("update_rule", rule_id=rule_id, fields=sorted(changes))
        return self._get_rule(rule_id)

    @BaseService.measure_operation("delete_rule")
    def delete_rule(self, rule_id: str) -> None:
        with self.transaction():
            if not self.rule_repository.delete(rule_id):
                raise NotFoundException(
                    "Pricing rule not found", code="RULE_NOT_FOUND", details={"rule_id": rule_id}
                )
        self.log_operation("delete_rule", rule_id=rule_id)

    # Activation toggles

    def _toggle(self, repository: BaseRepository, entity_id: str, label: str):
        with self.transaction():
            entity = repository.get_by_id(entity_id, load_relationships=False)
            if entity is None:
                raise NotFoundException(
                    f"{label} not found",
                    code=f"{label.upper()}_NOT_FOUND",
                    details={"id": entity_id},
                )
            entity.is_active = not entity.is_active
            repository.flush()
            is_active = entity.is_active
        self.log_operation(f"toggle_{label.lower()}", entity_id=entity_id, is_active=is_active)
        return repository.get_by_id(entity_id)

    @BaseService.measure_operation("toggle_court")
    def toggle_court(self, court_id: str) -> Court:
        return self._toggle(self.court_repository, court_id, "Court")

    @BaseService.measure_operation("toggle_equipment")
    def toggle_equipment(self, equipment_id: str) -> Equipment:
        return self._toggle(self.equipment_repository, equipment_id, "Equipment")

    @BaseService.measure_operation("toggle_coach")
    def toggle_coach(self, coach_id: str) -> Coach:
        return self._toggle(self.coach_repository, coach_id, "Coach")

    # Equipment stock

    @BaseService.measure_operation("update_equipment")
    def update_equipment(self, equipment_id: str, data: EquipmentStockUpdate) -> Equipment:
        """
        Edit stock, price or category.

        A new ``total_quantity`` without an explicit ``available_quantity``
        moves available stock by the same amount, so units out on bookings
        stay accounted for. The edit holds the equipment lock, so it never
        interleaves with a booking create or cancel.

        Raises:
            NotFoundException: no such equipment
            BusinessRuleException: available stock would exceed the total
                (``STOCK_EXCEEDS_TOTAL``) or leave fewer units out than
                bookings hold (``STOCK_BELOW_HELD``)
        """
        with self.lock_manager.hold([resource_key(ResourceKind.EQUIPMENT, equipment_id)]):
            with self.transaction():
                item = self.equipment_repository.get_by_id(equipment_id, load_relationships=False)
                if item is None:
                    raise NotFoundException(
                        "Equipment not found",
                        code="EQUIPMENT_NOT_FOUND",
                        details={"equipment_id": equipment_id},
                    )
                total = (
                    data.total_quantity if data.total_quantity is not None else item.total_quantity
                )
                if data.available_quantity is not None:
                    available = data.available_quantity
                else:
                    available = item.available_quantity + (total - item.total_quantity)

                if available > total:
                    raise BusinessRuleException(
                        "Available quantity cannot exceed total quantity",
                        code="STOCK_EXCEEDS_TOTAL",
                        details={"total_quantity": total, "available_quantity": available},
                    )
                held = self.booking_repository.units_held(equipment_id)
                if available < 0 or total - available < held:
                    raise BusinessRuleException(
                        f"{held} units are out on active bookings",
                        code="STOCK_BELOW_HELD",
                        details={
                            "total_quantity": total,
                            "available_quantity": available,
                            "units_held": held,
                        },
                    )

                item.total_quantity = total
                item.available_quantity = available
                if data.price_per_hour is not None:
                    item.price_per_hour = data.price_per_hour
                if data.category is not None:
                    item.category = data.category.value
                self.equipment_repository.flush()
        self.log_operation("update_equipment", equipment_id=equipment_id)
        return self.equipment_repository.get_by_id(equipment_id)
