"""
Entity Lock Manager
===================

Per-key mutual exclusion for read-check-write sequences on users,
content items and VSP requests.

Backends:
- Redis (redis.asyncio Lock) when a client is supplied; serializes across
  API processes.
- In-process asyncio.Lock per key otherwise (single-process deployments
  and tests).

Multi-key acquisition always takes keys in sorted order, so two operations
on the same pair of users cannot deadlock.

Usage:
    async with locks.hold(user_key("alice"), user_key("bob")):
        ...  # read, check, write
"""
import asyncio
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from redis.exceptions import LockError

from models.domain.user import normalize_username
from services.errors import LockTimeout

logger = logging.getLogger(__name__)


def user_key(username: str) -> str:
    return f"user:{normalize_username(username)}"


def content_key(content_id: str) -> str:
    return f"content:{content_id}"


class EntityLockManager:
    """Keyed locks with a bounded wait."""

    def __init__(self, redis_client=None, timeout: float = 10.0, lease: float = 30.0):
        """
        Args:
            redis_client: redis.asyncio client, or None for in-process locks
            timeout: Seconds to wait for a lock before raising LockTimeout
            lease: Seconds a Redis lock lives if its holder dies
        """
        self.redis = redis_client
        self.timeout = timeout
        self.lease = lease
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    @property
    def distributed(self) -> bool:
        return self.redis is not None

    @asynccontextmanager
    async def hold(self, *keys: str) -> AsyncIterator[None]:
        """Hold every key for the duration of the block."""
        async with AsyncExitStack() as stack:
            for key in sorted(set(keys)):
                await stack.enter_async_context(self._hold_one(key))
            yield

    def _hold_one(self, key: str):
        if self.redis is not None:
            return self._hold_redis(key)
        return self._hold_local(key)

    @asynccontextmanager
    async def _hold_local(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            try:
                await asyncio.wait_for(lock.acquire(), timeout=self.timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Timed out waiting for lock {key}")
                raise LockTimeout(f"Timed out waiting for {key}", key=key)
            try:
                yield
            finally:
                lock.release()
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    @asynccontextmanager
    async def _hold_redis(self, key: str) -> AsyncIterator[None]:
        lock = self.redis.lock(
            f"lock:{key}",
            timeout=self.lease,
            blocking_timeout=self.timeout,
        )
        if not await lock.acquire():
            logger.warning(f"Timed out waiting for redis lock {key}")
            raise LockTimeout(f"Timed out waiting for {key}", key=key)
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError:
                # Lease expired before release; the key is already free
                logger.warning(f"Redis lock {key} expired before release")

    def held_keys(self) -> Optional[list]:
        """Keys with an in-process holder or waiter (None for Redis locks)."""
        if self.redis is not None:
            return None
        return sorted(self._users)
