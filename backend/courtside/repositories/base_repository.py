# backend/courtside/repositories/base_repository.py
"""
Base repository for the Courtside platform.

Repositories never commit. The service layer owns the transaction scope;
repositories flush so generated ids are available and wrap SQLAlchemy
failures in ``RepositoryException`` with the original error chained as
``__cause__`` so the scope can classify it.
"""

import logging
from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException
from ..database.session_utils import supports_row_locks

T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Generic data access for one mapped model.

    Attributes:
        db: SQLAlchemy session (owned by the calling service)
        model: SQLAlchemy model class
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    @property
    def row_locks_enabled(self) -> bool:
        return supports_row_locks(self.db)

    def _fail(self, action: str, exc: SQLAlchemyError) -> RepositoryException:
        self.logger.error("Error %s %s: %s", action, self.model.__name__, exc)
        return RepositoryException(f"Failed {action} {self.model.__name__}: {exc}")

    def get_by_id(self, id: str, load_relationships: bool = True) -> Optional[T]:
        try:
            query = self.db.query(self.model).filter(self.model.id == id)
            if load_relationships:
                query = self._apply_eager_loading(query)
            return query.first()
        except SQLAlchemyError as exc:
            raise self._fail("retrieving", exc) from exc

    def create(self, **kwargs: Any) -> T:
        """Add a new entity and flush it (no commit)."""
        try:
            entity = self.model(**kwargs)
            self.db.add(entity)
            self.db.flush()
            return entity
        except SQLAlchemyError as exc:
            raise self._fail("creating", exc) from exc

    def add(self, entity: T) -> T:
        """Flush an already constructed entity (with its cascaded children)."""
        try:
            self.db.add(entity)
            self.db.flush()
            return entity
        except SQLAlchemyError as exc:
            raise self._fail("saving", exc) from exc

    def flush(self) -> None:
        """Flush pending ORM changes."""
        try:
            self.db.flush()
        except SQLAlchemyError as exc:
            raise self._fail("flushing", exc) from exc

    def update(self, id: str, **kwargs: Any) -> Optional[T]:
        """Update only the provided attributes; returns None if the row is missing."""
        try:
            entity = self.get_by_id(id, load_relationships=False)
            if entity is None:
                return None
            for key, value in kwargs.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)
            self.db.flush()
            return entity
        except SQLAlchemyError as exc:
            raise self._fail("updating", exc) from exc

    def delete(self, id: str) -> bool:
        try:
            entity = self.get_by_id(id, load_relationships=False)
            if entity is None:
                return False
            self.db.delete(entity)
            self.db.flush()
            return True
        except SQLAlchemyError as exc:
            raise self._fail("deleting", exc) from exc

    def find_one_by(self, **kwargs: Any) -> Optional[T]:
        try:
            return self.db.query(self.model).filter_by(**kwargs).first()
        except SQLAlchemyError as exc:
            raise self._fail("finding", exc) from exc

    # Protected helper methods for use by subclasses

    def _apply_eager_loading(self, query: Query) -> Query:
        """Override in subclasses to eager load relationships."""
        return query
