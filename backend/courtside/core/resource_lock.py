"""
Per-resource booking locks.

A booking commit holds one lock per resource it touches (court, each
equipment item, coach) from the availability check until the transaction
commits. Keys are ``(resource kind, resource id)`` pairs and are always
acquired in sorted order so two commits can never wait on each other.

Two backends are available: ``local`` keeps a process-wide table of
``threading.Lock`` objects; ``redis`` uses ``SET NX EX`` keys so several
API processes share the same lock table. Unlike best-effort locks, these
never fail open: a lock that cannot be acquired aborts the operation.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
import threading
import time
from typing import Dict, Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple

from redis import Redis
from redis.exceptions import RedisError

from ..monitoring.prometheus_metrics import prometheus_metrics
from .config import settings
from .enums import ResourceKind
from .exceptions import StoreFaultException, TransactionAbortedException
from .ulid_helper import generate_ulid

logger = logging.getLogger(__name__)

LockKey = Tuple[str, str]

_REDIS_POLL_INTERVAL_S = 0.05

# Delete the key only if it still holds our token.
_RELEASE_SCRIPT = """
if redis.call('get', KEYS[1]) == ARGV[1] then
    return redis.call('del', KEYS[1])
end
return 0
"""


def resource_key(kind: ResourceKind, resource_id: str) -> LockKey:
    return (kind.value, str(resource_id))


def _lock_name(key: LockKey) -> str:
    return f"{key[0]}:{key[1]}:mutex"


def _ordered(keys: Iterable[LockKey]) -> List[LockKey]:
    return sorted(set(keys))


class LockBackend(Protocol):
    def acquire(self, key: LockKey, timeout: float) -> bool: ...

    def release(self, key: LockKey) -> None: ...


class LocalLockBackend:
    """Process-wide lock table keyed by resource."""

    def __init__(self) -> None:
        self._registry_lock = threading.Lock()
        self._locks: Dict[LockKey, threading.Lock] = {}

    def _lock_for(self, key: LockKey) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def acquire(self, key: LockKey, timeout: float) -> bool:
        return self._lock_for(key).acquire(timeout=timeout)

    def release(self, key: LockKey) -> None:
        self._lock_for(key).release()


class RedisLockBackend:
    """Lock table shared across processes through Redis."""

    def __init__(self, client: Redis, namespace: str, ttl_s: int) -> None:
        self.client = client
        self.namespace = namespace
        self.ttl_s = ttl_s
        self._tokens: Dict[LockKey, str] = {}
        self._tokens_lock = threading.Lock()
        self._release = client.register_script(_RELEASE_SCRIPT)

    def _namespaced(self, key: LockKey) -> str:
        return f"{self.namespace}:lock:{_lock_name(key)}"

    def acquire(self, key: LockKey, timeout: float) -> bool:
        token = generate_ulid()
        deadline = time.monotonic() + timeout
        try:
            while True:
                if self.client.set(self._namespaced(key), token, nx=True, ex=self.ttl_s):
                    with self._tokens_lock:
                        self._tokens[key] = token
                    return True
                if time.monotonic() >= deadline:
                    return False
                time.sleep(_REDIS_POLL_INTERVAL_S)
        except RedisError as exc:
            raise StoreFaultException(
                "Lock store is unavailable", details={"resource": _lock_name(key)}
            ) from exc

    def release(self, key: LockKey) -> None:
        with self._tokens_lock:
            token = self._tokens.pop(key, None)
        if token is None:
            return
        self._release(keys=[self._namespaced(key)], args=[token])


class ResourceLockManager:
    """Acquire sets of resource locks in a deadlock-free order."""

    def __init__(self, backend: LockBackend, wait_timeout_s: float) -> None:
        self.backend = backend
        self.wait_timeout_s = wait_timeout_s

    @contextmanager
    def hold(self, keys: Iterable[LockKey]) -> Iterator[Sequence[LockKey]]:
        """
        Hold every lock in ``keys`` for the duration of the block.

        Raises:
            TransactionAbortedException: a lock could not be acquired in time
            StoreFaultException: the lock store is unreachable
        """
        ordered = _ordered(keys)
        acquired: List[LockKey] = []
        try:
            for key in ordered:
                if not self.backend.acquire(key, self.wait_timeout_s):
                    prometheus_metrics.record_resource_lock("acquire", "timeout")
                    logger.warning(
                        "resource_lock_timeout",
                        extra={"resource": _lock_name(key), "timeout_s": self.wait_timeout_s},
                    )
                    raise TransactionAbortedException(
                        "Resource is busy with another booking; please retry",
                        details={"resource_type": key[0], "resource_id": key[1]},
                    )
                acquired.append(key)
                prometheus_metrics.record_resource_lock("acquire", "success")
            yield tuple(ordered)
        finally:
            for key in reversed(acquired):
                try:
                    self.backend.release(key)
                    prometheus_metrics.record_resource_lock("release", "success")
                except RedisError as exc:
                    # The key expires after its TTL; nothing else can be done here.
                    prometheus_metrics.record_resource_lock("release", "error")
                    logger.warning(
                        "resource_lock_release_failed",
                        extra={"resource": _lock_name(key), "error": str(exc)},
                    )


_MANAGER: Optional[ResourceLockManager] = None
_MANAGER_LOCK = threading.Lock()


def build_lock_manager() -> ResourceLockManager:
    """Create a lock manager for the configured backend."""
    if settings.lock_backend == "redis":
        client = Redis.from_url(
            settings.redis_url.get_secret_value(),
            encoding="utf-8",
            decode_responses=True,
        )
        backend: LockBackend = RedisLockBackend(
            client, namespace=settings.lock_namespace, ttl_s=settings.lock_ttl_seconds
        )
    else:
        backend = LocalLockBackend()
    return ResourceLockManager(backend, wait_timeout_s=settings.lock_wait_timeout_seconds)


def get_lock_manager() -> ResourceLockManager:
    """Process-wide lock manager (lazily built)."""
    global _MANAGER
    if _MANAGER is not None:
        return _MANAGER
    with _MANAGER_LOCK:
        if _MANAGER is None:
            _MANAGER = build_lock_manager()
        return _MANAGER
