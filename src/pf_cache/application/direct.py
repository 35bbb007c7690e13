"""Explicit-deletion strategy for single-item and aggregate entries.

These keys carry no generation suffix: there is no ordering to rotate, and
an aggregate recomputed from a stale total is unsafe under concurrent
writers. Writers delete them (CacheInvalidator), readers repopulate.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from pydantic import BaseModel

from config.settings import settings
from src.pf_cache.application.entries import load_entry, store_entry
from src.pf_cache.domain.models import Cached
from src.pf_common.kv_store import KeyValueStore

M = TypeVar("M", bound=BaseModel)


class DirectCache:
    def __init__(self, store: KeyValueStore, ttl_seconds: int | None = None) -> None:
        self._store = store
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.CACHE_TTL_SECONDS

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[M]],
        model: type[M],
    ) -> Cached[M]:
        hit = await load_entry(self._store, key, model)
        if hit is not None:
            return Cached(value=hit, cached=True)
        value = await loader()
        await store_entry(self._store, key, value, self._ttl)
        return Cached(value=value, cached=False)
