"""Fixed-window rate limiting for public form submissions.

Each key (``ip:<address>`` or ``email:<address>``) gets its own window that
starts on the first request seen for it. The counter storage is pluggable:
the in-memory store only throttles correctly within a single process, the
Redis store shares counters between instances.
"""

import logging
from abc import ABC, abstractmethod
import threading
import time
from typing import Callable, Dict, Optional

import redis.asyncio as redis
from pydantic import BaseModel, Field

from app.core.config import settings

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class RateLimitEntry(BaseModel):
    """Counter state for one key.

    Attributes:
        count: Requests seen in the current window
        reset_at: Epoch seconds after which the window is over
    """
    count: int = Field(..., ge=0)
    reset_at: float


class RateLimitStore(ABC):
    """Key-value store interface used by the rate limiter."""

    @abstractmethod
    async def get(self, key: str) -> Optional[RateLimitEntry]:
        pass

    @abstractmethod
    async def set(self, key: str, entry: RateLimitEntry) -> None:
        pass

    @abstractmethod
    async def increment(self, key: str, window_seconds: int) -> int:
        """Atomically add one to the counter, starting a window if the key is missing."""
        pass


class InMemoryRateLimitStore(RateLimitStore):
    """Process-local store. Counters reset when the process restarts."""

    def __init__(self, clock: Clock = time.time):
        self.clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}
        # the sweep job runs on a scheduler thread
        self._lock = threading.Lock()

    async def get(self, key: str) -> Optional[RateLimitEntry]:
        with self._lock:
            entry = self._entries.get(key)
            return entry.model_copy() if entry else None

    async def set(self, key: str, entry: RateLimitEntry) -> None:
        with self._lock:
            self._entries[key] = entry.model_copy()

    async def increment(self, key: str, window_seconds: int) -> int:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = RateLimitEntry(count=0, reset_at=self.clock() + window_seconds)
                self._entries[key] = entry
            entry.count += 1
            return entry.count

    def sweep_expired(self) -> int:
        """Drop entries whose window has ended.

        Returns:
            Number of entries removed
        """
        now = self.clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if now > entry.reset_at]
            for key in expired:
                del self._entries[key]

        if expired:
            logger.info(f"Swept {len(expired)} expired rate limit entries")
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class RedisRateLimitStore(RateLimitStore):
    """Shared store backed by Redis keys with a native TTL."""

    def __init__(self, client: redis.Redis, prefix: str = "ratelimit:", clock: Clock = time.time):
        self.client = client
        self.prefix = prefix
        self.clock = clock

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[RateLimitEntry]:
        count = await self.client.get(self._key(key))
        if count is None:
            return None

        ttl_ms = await self.client.pttl(self._key(key))
        if ttl_ms == -2:
            return None
        now = self.clock()
        # a key without expiry is treated as an ended window so it gets rewritten
        reset_at = now + ttl_ms / 1000 if ttl_ms >= 0 else now - 1
        return RateLimitEntry(count=int(count), reset_at=reset_at)

    async def set(self, key: str, entry: RateLimitEntry) -> None:
        ttl_ms = max(1, int((entry.reset_at - self.clock()) * 1000))
        await self.client.set(self._key(key), entry.count, px=ttl_ms)

    async def increment(self, key: str, window_seconds: int) -> int:
        count = await self.client.incr(self._key(key))
        if count == 1:
            await self.client.pexpire(self._key(key), window_seconds * 1000)
        return int(count)


class RateLimiter:
    """Fixed-window rate limiter over a ``RateLimitStore``."""

    def __init__(
        self,
        store: RateLimitStore,
        window_seconds: int = settings.RATE_LIMIT_WINDOW_SECONDS,
        clock: Clock = time.time,
    ):
        self.store = store
        self.window_seconds = window_seconds
        self.clock = clock

    async def is_rate_limited(self, key: str, limit: int) -> bool:
        """Record a request for ``key`` and report whether it is over ``limit``.

        The window is checked for expiry before the counter is read, so a
        stale count from an ended window never blocks a request.

        Args:
            key: Rate limit key, e.g. ``ip:203.0.113.7``
            limit: Maximum number of requests allowed per window

        Returns:
            True if the request must be rejected
        """
        now = self.clock()
        entry = await self.store.get(key)

        if entry is None or now > entry.reset_at:
            await self.store.set(key, RateLimitEntry(count=1, reset_at=now + self.window_seconds))
            return False

        if entry.count >= limit:
            return True

        await self.store.increment(key, self.window_seconds)
        return False


def build_rate_limit_store() -> RateLimitStore:
    """Create the store selected by ``RATE_LIMIT_BACKEND``."""
    if settings.RATE_LIMIT_BACKEND == "redis":
        logger.info(f"Using Redis rate limit store at {settings.REDIS_HOST}:{settings.REDIS_PORT}")
        client = redis.Redis(host=settings.REDIS_HOST, port=settings.REDIS_PORT, db=1)
        return RedisRateLimitStore(client)

    if settings.RATE_LIMIT_BACKEND != "memory":
        logger.warning(
            f"Unknown RATE_LIMIT_BACKEND '{settings.RATE_LIMIT_BACKEND}', falling back to memory"
        )
    return InMemoryRateLimitStore()


contact_rate_limiter = RateLimiter(build_rate_limit_store())
