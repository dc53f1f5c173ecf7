# backend/courtside/repositories/coach_repository.py
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from ..core.exceptions import RepositoryException
from ..models.coach import Coach
from .base_repository import BaseRepository


class CoachRepository(BaseRepository[Coach]):
    def __init__(self, db: Session):
        super().__init__(db, Coach)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(selectinload(Coach.availability))

    def list_coaches(
        self, active: Optional[bool] = None, specialization: Optional[str] = None
    ) -> List[Coach]:
        try:
            query = self._apply_eager_loading(self.db.query(Coach))
            if active is not None:
                query = query.filter(Coach.is_active.is_(active))
            if specialization:
                query = query.filter(Coach.specialization == specialization)
            return query.order_by(Coach.name).all()
        except SQLAlchemyError as exc:
            self.logger.error("Error listing coaches: %s", exc)
            raise RepositoryException(f"Failed to list coaches: {exc}") from exc
