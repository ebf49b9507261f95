import pytest
from unittest.mock import AsyncMock, MagicMock

from app.services.rate_limit_service import (
    InMemoryRateLimitStore,
    RateLimitEntry,
    RateLimiter,
    RateLimitStore,
    RedisRateLimitStore,
)
from app.tests.fixtures.contact import FakeClock

WINDOW = 3600


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    return InMemoryRateLimitStore(clock=clock)


@pytest.fixture
def limiter(memory_store, clock):
    return RateLimiter(memory_store, window_seconds=WINDOW, clock=clock)


def test_store_interface_is_abstract():
    with pytest.raises(TypeError):
        RateLimitStore()


@pytest.mark.asyncio
class TestRateLimiter:

    async def test_allows_up_to_limit_then_rejects(self, limiter):
        results = [await limiter.is_rate_limited("ip:1.2.3.4", 5) for _ in range(6)]

        assert results == [False, False, False, False, False, True]

    async def test_rejected_requests_do_not_grow_count(self, limiter, memory_store):
        for _ in range(10):
            await limiter.is_rate_limited("email:ava@example.com", 3)

        entry = await memory_store.get("email:ava@example.com")
        assert entry.count == 3

    async def test_new_window_after_reset_time(self, limiter, clock):
        for _ in range(6):
            await limiter.is_rate_limited("ip:1.2.3.4", 5)

        clock.advance(WINDOW)
        # still inside the window: reset only once now > reset_at
        assert await limiter.is_rate_limited("ip:1.2.3.4", 5) is True

        clock.advance(1)
        assert await limiter.is_rate_limited("ip:1.2.3.4", 5) is False
        assert await limiter.is_rate_limited("ip:1.2.3.4", 5) is False

    async def test_reset_writes_fresh_entry(self, limiter, memory_store, clock):
        await memory_store.set("ip:1.2.3.4", RateLimitEntry(count=99, reset_at=clock() - 1))

        assert await limiter.is_rate_limited("ip:1.2.3.4", 5) is False

        entry = await memory_store.get("ip:1.2.3.4")
        assert entry.count == 1
        assert entry.reset_at == clock() + WINDOW

    async def test_keys_have_independent_windows(self, limiter, clock):
        for _ in range(5):
            await limiter.is_rate_limited("ip:1.1.1.1", 5)

        clock.advance(1800)
        await limiter.is_rate_limited("ip:2.2.2.2", 5)
        clock.advance(1801)

        # first key's window ended, second key is still counting
        assert await limiter.is_rate_limited("ip:1.1.1.1", 5) is False
        for _ in range(4):
            assert await limiter.is_rate_limited("ip:2.2.2.2", 5) is False
        assert await limiter.is_rate_limited("ip:2.2.2.2", 5) is True


@pytest.mark.asyncio
class TestInMemoryRateLimitStore:

    async def test_get_returns_copy(self, memory_store, clock):
        await memory_store.set("k", RateLimitEntry(count=1, reset_at=clock() + WINDOW))

        entry = await memory_store.get("k")
        entry.count = 50

        assert (await memory_store.get("k")).count == 1

    async def test_increment_starts_missing_key(self, memory_store, clock):
        assert await memory_store.increment("k", WINDOW) == 1
        assert await memory_store.increment("k", WINDOW) == 2

        entry = await memory_store.get("k")
        assert entry.reset_at == clock() + WINDOW

    async def test_sweep_removes_only_expired(self, memory_store, clock):
        await memory_store.set("old", RateLimitEntry(count=3, reset_at=clock() + 10))
        await memory_store.set("new", RateLimitEntry(count=1, reset_at=clock() + WINDOW))

        clock.advance(11)
        removed = memory_store.sweep_expired()

        assert removed == 1
        assert len(memory_store) == 1
        assert await memory_store.get("old") is None
        assert await memory_store.get("new") is not None


@pytest.mark.asyncio
class TestRedisRateLimitStore:

    @pytest.fixture
    def redis_client(self):
        client = MagicMock()
        client.get = AsyncMock()
        client.pttl = AsyncMock()
        client.set = AsyncMock()
        client.incr = AsyncMock()
        client.pexpire = AsyncMock()
        return client

    async def test_get_missing_key(self, redis_client, clock):
        redis_client.get.return_value = None
        store = RedisRateLimitStore(redis_client, clock=clock)

        assert await store.get("ip:1.2.3.4") is None
        redis_client.get.assert_called_once_with("ratelimit:ip:1.2.3.4")

    async def test_get_uses_ttl_for_reset_time(self, redis_client, clock):
        redis_client.get.return_value = b"2"
        redis_client.pttl.return_value = 120_000
        store = RedisRateLimitStore(redis_client, clock=clock)

        entry = await store.get("ip:1.2.3.4")

        assert entry.count == 2
        assert entry.reset_at == clock() + 120

    async def test_set_uses_millisecond_expiry(self, redis_client, clock):
        store = RedisRateLimitStore(redis_client, clock=clock)

        await store.set("email:a@b.co", RateLimitEntry(count=1, reset_at=clock() + WINDOW))

        redis_client.set.assert_called_once_with("ratelimit:email:a@b.co", 1, px=WINDOW * 1000)

    async def test_increment_sets_expiry_on_new_key(self, redis_client, clock):
        redis_client.incr.return_value = 1
        store = RedisRateLimitStore(redis_client, clock=clock)

        assert await store.increment("k", WINDOW) == 1
        redis_client.pexpire.assert_called_once_with("ratelimit:k", WINDOW * 1000)

        redis_client.incr.return_value = 2
        redis_client.pexpire.reset_mock()
        assert await store.increment("k", WINDOW) == 2
        redis_client.pexpire.assert_not_called()

    async def test_limiter_over_redis_store(self, redis_client, clock):
        redis_client.get.return_value = b"5"
        redis_client.pttl.return_value = 60_000
        limiter = RateLimiter(RedisRateLimitStore(redis_client, clock=clock), WINDOW, clock)

        assert await limiter.is_rate_limited("ip:1.2.3.4", 5) is True
        redis_client.incr.assert_not_called()
