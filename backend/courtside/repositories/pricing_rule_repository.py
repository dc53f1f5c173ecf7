# backend/courtside/repositories/pricing_rule_repository.py
import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.pricing_rule import PricingRule
from .base_repository import BaseRepository


class PricingRuleRepository(BaseRepository[PricingRule]):
    def __init__(self, db: Session):
        super().__init__(db, PricingRule)
        self.logger = logging.getLogger(__name__)

    def list_rules(self, active_only: bool = False) -> List[PricingRule]:
        """Rules ordered by priority (highest first), ties broken by id."""
        try:
            query = self.db.query(PricingRule)
            if active_only:
                query = query.filter(PricingRule.is_active.is_(True))
            return query.order_by(PricingRule.priority.desc(), PricingRule.id).all()
        except SQLAlchemyError as exc:
            self.logger.error("Error listing pricing rules: %s", exc)
            raise RepositoryException(f"Failed to list pricing rules: {exc}") from exc

    def list_active(self) -> List[PricingRule]:
        return self.list_rules(active_only=True)
