"""
Database engine, session factory, and metadata shared across the application.

The engine is created explicitly at startup (``init_engine``) and disposed
at shutdown (``dispose_engine``); services always receive their ``Session``
as a constructor argument.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import Any, Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker

from ..core.config import settings

logger = logging.getLogger(__name__)

Base: DeclarativeMeta = declarative_base()

SessionLocal = sessionmaker(autocommit=False, autoflush=False)

_engine: Optional[Engine] = None

_POSTGRES_POOL_KWARGS: dict[str, Any] = {
    "pool_size": 5,
    "max_overflow": 10,
    "pool_timeout": 5,
    "pool_recycle": 300,
    "pool_pre_ping": True,
}


def _build_engine_kwargs(db_url: str) -> dict[str, Any]:
    if db_url.startswith("sqlite"):
        # Each request thread opens its own connection; waits on the write lock instead of failing
        return {"connect_args": {"check_same_thread": False, "timeout": 30}}
    return dict(_POSTGRES_POOL_KWARGS)


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: Any, _connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_engine(db_url: Optional[str] = None, **overrides: Any) -> Engine:
    """Create the engine and bind the session factory (replaces any previous engine)."""
    global _engine
    url = db_url or settings.database_url
    if _engine is not None:
        _engine.dispose()

    kwargs = _build_engine_kwargs(url)
    kwargs.update(overrides)
    engine = create_engine(url, echo=settings.database_echo, future=True, **kwargs)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_foreign_keys(engine)

    SessionLocal.configure(bind=engine)
    _engine = engine
    logger.info("Database engine initialized (dialect=%s)", engine.dialect.name)
    return engine


def get_engine() -> Engine:
    if _engine is None:
        return init_engine()
    return _engine


def dispose_engine() -> None:
    """Release pooled connections at shutdown."""
    global _engine
    if _engine is not None:
        _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None


def create_all(engine: Optional[Engine] = None) -> None:
    """Create every table registered on ``Base`` (development and tests)."""
    from .. import models  # noqa: F401  (register mappers)

    Base.metadata.create_all(bind=engine or get_engine())


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a request-scoped session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Context manager for short-lived DB operations (commands, scripts)."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


__all__ = [
    "Base",
    "SessionLocal",
    "create_all",
    "dispose_engine",
    "get_db",
    "get_db_session",
    "get_engine",
    "init_engine",
]
