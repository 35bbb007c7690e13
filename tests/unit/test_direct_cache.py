"""Unit tests for explicit-deletion single-item/aggregate caching."""

from pydantic import BaseModel

from src.pf_cache.application.direct import DirectCache
from src.pf_cache.domain.models import Cached


class Total(BaseModel):
    total_cents: int


class TestDirectCache:
    async def test_miss_populates_then_hit(self, kv_store) -> None:
        calls = []

        async def load() -> Total:
            calls.append(1)
            return Total(total_cents=1500)

        cache = DirectCache(kv_store, ttl_seconds=30)
        first = await cache.get_or_load("user:u1:expenses:total", load, Total)
        second = await cache.get_or_load("user:u1:expenses:total", load, Total)

        assert (first.cached, second.cached) == (False, True)
        assert second.value.total_cents == 1500
        assert len(calls) == 1
        assert kv_store.ttls["user:u1:expenses:total"] == 30

    async def test_deleted_key_reloads(self, kv_store) -> None:
        async def load() -> Total:
            return Total(total_cents=1)

        cache = DirectCache(kv_store, ttl_seconds=30)
        await cache.get_or_load("k", load, Total)
        await kv_store.delete("k")
        assert (await cache.get_or_load("k", load, Total)).cached is False

    async def test_outage_serves_loader_result(self, kv_store) -> None:
        kv_store.down = True

        async def load() -> Total:
            return Total(total_cents=7)

        result = await DirectCache(kv_store, ttl_seconds=30).get_or_load("k", load, Total)
        assert result.cached is False
        assert result.value.total_cents == 7

    def test_payload_carries_cached_flag(self) -> None:
        assert Cached(value=Total(total_cents=3), cached=True).to_payload() == {
            "total_cents": 3,
            "cached": True,
        }
