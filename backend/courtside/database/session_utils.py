"""
Helpers for working with SQLAlchemy sessions in a dialect-agnostic way.
"""

from __future__ import annotations

from sqlalchemy.exc import UnboundExecutionError
from sqlalchemy.orm import Session

ROW_LOCK_DIALECTS = frozenset({"postgresql", "mysql", "oracle"})


def get_dialect_name(session: Session, default: str = "sqlite") -> str:
    """
    Return the dialect name of the engine a session is bound to.

    Falls back to ``default`` for unbound sessions (e.g. unit-test doubles).
    """
    try:
        bind = session.get_bind()
    except UnboundExecutionError:
        return default
    return getattr(getattr(bind, "dialect", None), "name", None) or default


def supports_row_locks(session: Session) -> bool:
    """Whether ``SELECT ... FOR UPDATE`` is meaningful on this session's dialect."""
    return get_dialect_name(session) in ROW_LOCK_DIALECTS
