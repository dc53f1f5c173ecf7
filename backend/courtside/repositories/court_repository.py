# backend/courtside/repositories/court_repository.py
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.court import Court
from .base_repository import BaseRepository


class CourtRepository(BaseRepository[Court]):
    def __init__(self, db: Session):
        super().__init__(db, Court)
        self.logger = logging.getLogger(__name__)

    def list_courts(
        self,
        active: Optional[bool] = None,
        court_type: Optional[str] = None,
        sport: Optional[str] = None,
    ) -> List[Court]:
        try:
            query = self.db.query(Court)
            if active is not None:
                query = query.filter(Court.is_active.is_(active))
            if court_type:
                query = query.filter(Court.type == court_type)
            if sport:
                query = query.filter(Court.sport == sport)
            return query.order_by(Court.name).all()
        except SQLAlchemyError as exc:
            self.logger.error("Error listing courts: %s", exc)
            raise RepositoryException(f"Failed to list courts: {exc}") from exc
