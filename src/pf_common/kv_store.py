"""Key-value store adapter — the only shared mutable state outside PostgreSQL.

Callers depend on the KeyValueStore Protocol; RedisKeyValueStore is the
production implementation. Cross-request coordination relies exclusively on
the store's atomic primitives (INCR, SET NX, MULTI/EXEC batches), so any
number of app instances can share one Redis.

Every Redis failure surfaces as KeyValueStoreError. Whether that is fatal is
the caller's decision: read paths degrade, write paths abort.
"""

from dataclasses import dataclass
from typing import Any, Protocol

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from config.settings import settings


_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Shared client over one connection pool per process."""
    global _pool  # noqa: PLW0603
    if _pool is None:
        _pool = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
            socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
        )
    return _pool


async def close_redis() -> None:
    global _pool  # noqa: PLW0603
    if _pool is not None:
        await _pool.aclose()
        _pool = None


class KeyValueStoreError(Exception):
    """Raised when the key-value store cannot complete an operation."""


@dataclass(frozen=True)
class KvOp:
    command: str  # get | set | set_if_absent | incr | delete | exists
    key: str
    value: str | None = None
    ttl_seconds: int | None = None
    delta: int = 1


class KvBatch:
    """Ordered list of operations executed as one MULTI/EXEC transaction.

    Builder methods return self so batches read like Redis pipelines:

        batch = KvBatch().set_if_absent(key, "1").get(key)
        _, generation = await store.batch(batch)
    """

    def __init__(self) -> None:
        self.ops: list[KvOp] = []

    def __len__(self) -> int:
        return len(self.ops)

    def get(self, key: str) -> "KvBatch":
        self.ops.append(KvOp("get", key))
        return self

    def set(self, key: str, value: str, ttl_seconds: int) -> "KvBatch":
        self.ops.append(KvOp("set", key, value=value, ttl_seconds=ttl_seconds))
        return self

    def set_if_absent(self, key: str, value: str) -> "KvBatch":
        self.ops.append(KvOp("set_if_absent", key, value=value))
        return self

    def incr(self, key: str, delta: int = 1) -> "KvBatch":
        self.ops.append(KvOp("incr", key, delta=delta))
        return self

    def delete(self, key: str) -> "KvBatch":
        self.ops.append(KvOp("delete", key))
        return self

    def exists(self, key: str) -> "KvBatch":
        self.ops.append(KvOp("exists", key))
        return self


class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def set_if_absent(self, key: str, value: str) -> bool: ...

    async def incr(self, key: str, delta: int = 1) -> int: ...

    async def delete(self, *keys: str) -> int: ...

    async def exists(self, key: str) -> bool: ...

    async def batch(self, batch: KvBatch) -> list[Any]: ...


def _normalize(command: str, raw: Any) -> Any:
    """Map raw Redis replies onto the Protocol's return types."""
    if command in ("set_if_absent", "exists"):
        return bool(raw)
    if command in ("incr", "delete"):
        return int(raw)
    if command == "set":
        return None
    return raw


class RedisKeyValueStore:
    """KeyValueStore over redis.asyncio (decode_responses=True)."""

    def __init__(self, client: aioredis.Redis) -> None:
        self._redis = client

    async def get(self, key: str) -> str | None:
        try:
            return await self._redis.get(key)
        except RedisError as e:
            raise KeyValueStoreError(f"GET {key} failed") from e

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._redis.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            raise KeyValueStoreError(f"SET {key} failed") from e

    async def set_if_absent(self, key: str, value: str) -> bool:
        try:
            return bool(await self._redis.set(key, value, nx=True))
        except RedisError as e:
            raise KeyValueStoreError(f"SET NX {key} failed") from e

    async def incr(self, key: str, delta: int = 1) -> int:
        try:
            return int(await self._redis.incrby(key, delta))
        except RedisError as e:
            raise KeyValueStoreError(f"INCRBY {key} failed") from e

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return int(await self._redis.delete(*keys))
        except RedisError as e:
            raise KeyValueStoreError(f"DEL {' '.join(keys)} failed") from e

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._redis.exists(key))
        except RedisError as e:
            raise KeyValueStoreError(f"EXISTS {key} failed") from e

    async def batch(self, batch: KvBatch) -> list[Any]:
        if not batch.ops:
            return []
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                for op in batch.ops:
                    if op.command == "get":
                        pipe.get(op.key)
                    elif op.command == "set":
                        pipe.set(op.key, op.value, ex=op.ttl_seconds)
                    elif op.command == "set_if_absent":
                        pipe.set(op.key, op.value, nx=True)
                    elif op.command == "incr":
                        pipe.incrby(op.key, op.delta)
                    elif op.command == "delete":
                        pipe.delete(op.key)
                    elif op.command == "exists":
                        pipe.exists(op.key)
                    else:
                        raise ValueError(f"Unknown batch command: {op.command}")
                replies = await pipe.execute()
        except RedisError as e:
            raise KeyValueStoreError(f"Batch of {len(batch)} ops failed") from e
        return [_normalize(op.command, raw) for op, raw in zip(batch.ops, replies)]


async def get_kv_store() -> KeyValueStore:
    """FastAPI dependency: KeyValueStore over the shared Redis pool."""
    return RedisKeyValueStore(await get_redis())
