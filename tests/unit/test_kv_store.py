"""Unit tests for the Redis-backed KeyValueStore adapter."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.pf_common.kv_store import KeyValueStoreError, KvBatch, RedisKeyValueStore


def _redis_with_pipeline(replies: list) -> tuple[MagicMock, MagicMock]:
    pipe = MagicMock()
    pipe.__aenter__ = AsyncMock(return_value=pipe)
    pipe.__aexit__ = AsyncMock(return_value=False)
    pipe.execute = AsyncMock(return_value=replies)
    client = MagicMock()
    client.pipeline.return_value = pipe
    return client, pipe


class TestKvBatch:
    def test_builder_keeps_order(self) -> None:
        batch = KvBatch().set_if_absent("g", "1").get("g").delete("x")
        assert [op.command for op in batch.ops] == ["set_if_absent", "get", "delete"]
        assert len(batch) == 3

    def test_empty_batch_is_falsy(self) -> None:
        assert not KvBatch()


class TestRedisKeyValueStore:
    async def test_batch_runs_in_transaction_and_normalizes(self) -> None:
        client, pipe = _redis_with_pipeline([None, "1", 3, 1, 0, True])
        store = RedisKeyValueStore(client)
        batch = (
            KvBatch()
            .set_if_absent("gen", "1")
            .get("gen")
            .incr("counter")
            .delete("a")
            .exists("b")
            .set("c", "v", 60)
        )
        result = await store.batch(batch)
        client.pipeline.assert_called_once_with(transaction=True)
        assert result == [False, "1", 3, 1, False, None]
        pipe.set.assert_any_call("gen", "1", nx=True)
        pipe.set.assert_any_call("c", "v", ex=60)
        pipe.incrby.assert_called_once_with("counter", 1)

    async def test_empty_batch_skips_redis(self) -> None:
        client, _ = _redis_with_pipeline([])
        assert await RedisKeyValueStore(client).batch(KvBatch()) == []
        client.pipeline.assert_not_called()

    async def test_batch_failure_is_wrapped(self) -> None:
        client, pipe = _redis_with_pipeline([])
        pipe.execute = AsyncMock(side_effect=RedisConnectionError("down"))
        with pytest.raises(KeyValueStoreError):
            await RedisKeyValueStore(client).batch(KvBatch().incr("g"))

    async def test_get_failure_is_wrapped(self) -> None:
        client = MagicMock()
        client.get = AsyncMock(side_effect=RedisConnectionError("down"))
        with pytest.raises(KeyValueStoreError):
            await RedisKeyValueStore(client).get("k")

    async def test_set_passes_ttl(self) -> None:
        client = MagicMock()
        client.set = AsyncMock(return_value=True)
        await RedisKeyValueStore(client).set("k", "v", 300)
        client.set.assert_awaited_once_with("k", "v", ex=300)

    async def test_set_if_absent_reports_existing_key(self) -> None:
        client = MagicMock()
        client.set = AsyncMock(return_value=None)
        assert await RedisKeyValueStore(client).set_if_absent("k", "1") is False

    async def test_delete_without_keys_is_noop(self) -> None:
        client = MagicMock()
        client.delete = AsyncMock()
        assert await RedisKeyValueStore(client).delete() == 0
        client.delete.assert_not_called()

    async def test_delete_returns_removed_count(self) -> None:
        client = MagicMock()
        client.delete = AsyncMock(return_value=2)
        assert await RedisKeyValueStore(client).delete("a", "b") == 2

    async def test_exists_is_bool(self) -> None:
        client = MagicMock()
        client.exists = AsyncMock(return_value=1)
        assert await RedisKeyValueStore(client).exists("k") is True
