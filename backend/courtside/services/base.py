# backend/courtside/services/base.py
"""
Base Service Pattern for the Courtside platform.

Provides common functionality for all service classes:
- Scoped transactions with store-error classification
- Logging
- Performance monitoring
"""

from contextlib import contextmanager
from functools import wraps
import logging
import time
from typing import Any, Callable, Dict, Iterator, TypeVar, cast

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import (
    DomainException,
    RepositoryException,
    StoreFaultException,
    TransactionAbortedException,
)
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

SLOW_OPERATION_SECONDS = 1.0

# PostgreSQL serialization_failure / deadlock_detected
_RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def _underlying_store_error(exc: BaseException) -> BaseException:
    if isinstance(exc, RepositoryException) and exc.__cause__ is not None:
        return exc.__cause__
    return exc


def is_write_conflict(exc: BaseException) -> bool:
    """Whether a store error means "another writer won": safe to retry from scratch."""
    exc = _underlying_store_error(exc)
    if isinstance(exc, IntegrityError):
        return True
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate in _RETRYABLE_SQLSTATES:
        return True
    return isinstance(exc, OperationalError) and "database is locked" in str(exc).lower()


class BaseService:
    """
    Base class for all service layer components.

    Services receive their ``Session`` explicitly and never read ambient
    database state.
    """

    def __init__(self, db: Session):
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Scoped transaction: commit on normal exit, roll back on every other exit.

        Domain exceptions propagate unchanged. Store failures are translated:
        write conflicts become ``TransactionAbortedException`` and anything
        else becomes ``StoreFaultException``, with the original chained.

        Usage:
            with self.transaction():
                self.repository.create(...)
        """
        try:
            yield self.db
            self.db.commit()
        except DomainException:
            self.db.rollback()
            raise
        except (SQLAlchemyError, RepositoryException) as exc:
            self.logger.error("Transaction rolled back: %s", exc)
            self.db.rollback()
            cause = _underlying_store_error(exc)
            details = {"cause": type(cause).__name__}
            if is_write_conflict(exc):
                raise TransactionAbortedException(details=details) from exc
            raise StoreFaultException(details=details) from exc
        except Exception:
            self.logger.exception("Unexpected error in transaction")
            self.db.rollback()
            raise

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Decorator to measure operation performance.

        Usage:
            @BaseService.measure_operation("create_booking")
            def create_booking(self, data):
                ...
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self: "BaseService", *args: Any, **kwargs: Any) -> Any:
                start_time = time.perf_counter()
                error_type = None
                try:
                    return func(self, *args, **kwargs)
                except Exception as exc:
                    error_type = type(exc).__name__
                    raise
                finally:
                    elapsed = time.perf_counter() - start_time
                    if elapsed > SLOW_OPERATION_SECONDS:
                        self.logger.warning(
                            "Slow operation detected: %s took %.2fs", operation_name, elapsed
                        )
                    prometheus_metrics.record_service_operation(
                        service=self.__class__.__name__,
                        operation=operation_name,
                        duration=elapsed,
                        status="error" if error_type else "success",
                        error_type=error_type,
                    )

            return cast(F, wrapper)

        return decorator

    def log_operation(self, operation: str, **context: Any) -> None:
        """Log an operation with structured context."""
        self.logger.info("Operation: %s", operation, extra={"operation": operation, **context})
