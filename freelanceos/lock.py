"""
Single-flight guard for the demo reset.

Supports an in-process fallback for tests/local runs and a Redis-backed
implementation for deployments that run more than one worker.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Optional, Protocol

import redis
from redis import exceptions as redis_exceptions
from redis.lock import Lock


class ResetLock(Protocol):
    """At most one holder at a time; acquisition never blocks."""

    def acquire(self) -> bool:
        ...

    def release(self) -> None:
        ...


@dataclass
class InMemoryResetLock:
    """Process-local guard backed by a threading lock."""

    _lock: threading.Lock = field(default_factory=threading.Lock)

    def acquire(self) -> bool:
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        if self._lock.locked():
            self._lock.release()

    @property
    def held(self) -> bool:
        return self._lock.locked()


@dataclass
class RedisResetLock:
    """Redis-backed guard; the key expires if a holder dies mid-reset."""

    url: str
    key: str = "freelanceos:reset-lock"
    timeout_seconds: int = 120

    def __post_init__(self):
        self.client = redis.Redis.from_url(self.url)
        self._current: Optional[Lock] = None

    def acquire(self) -> bool:
        lock = self.client.lock(self.key, timeout=self.timeout_seconds)
        if not lock.acquire(blocking=False):
            return False
        self._current = lock
        return True

    def release(self) -> None:
        lock, self._current = self._current, None
        if lock is None:
            return
        try:
            lock.release()
        except redis_exceptions.LockError:
            # Expired while the reset was still running; nothing left to free.
            pass
