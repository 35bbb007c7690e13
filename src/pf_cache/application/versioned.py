"""Generation-rotation strategy for paginated list reads.

Each (user, scope) owns a monotonically increasing generation counter.
Pages are cached under keys that embed the current generation; a write
bumps the counter (see CacheInvalidator), which makes every page of the
previous generation unreachable without deleting it. Orphaned pages simply
age out after the TTL.

Read path:
  1. SET NX + GET of the counter in one MULTI/EXEC (initializes to 1).
  2. Build the page key from (user, scope, generation, page).
  3. Hit  -> deserialize, cached=True.
  4. Miss -> run the loader, populate with TTL, cached=False.

Known staleness window: a reader that fetched generation g just before a
writer bumped it may still populate a g-page computed from pre-write rows.
Nobody reads g after the bump, so the orphan is harmless; the window is
bounded by CACHE_TTL_SECONDS.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pydantic import BaseModel

from config.settings import settings
from src.pf_cache.application.entries import load_entry, store_entry
from src.pf_cache.domain.keys import generation_key, page_key
from src.pf_cache.domain.models import CacheScope, Cached
from src.pf_common.kv_store import KeyValueStore, KeyValueStoreError, KvBatch

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class VersionedCache:
    def __init__(self, store: KeyValueStore, ttl_seconds: int | None = None) -> None:
        self._store = store
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.CACHE_TTL_SECONDS

    async def current_generation(self, user_id: str, scope: CacheScope) -> str | None:
        """Ensure the counter exists (initialized to 1) and read it in one round trip."""
        key = generation_key(user_id, scope)
        _, generation = await self._store.batch(KvBatch().set_if_absent(key, "1").get(key))
        return generation

    async def resolve(
        self,
        user_id: str,
        scope: CacheScope,
        page: int,
        loader: Callable[[], Awaitable[M]],
        model: type[M],
    ) -> Cached[M]:
        try:
            generation = await self.current_generation(user_id, scope)
        except KeyValueStoreError:
            logger.warning(
                "Generation lookup failed, serving from database: user=%s scope=%s",
                user_id,
                scope.segment,
                exc_info=True,
            )
            generation = None

        if generation is None:
            return Cached(value=await loader(), cached=False)

        key = page_key(user_id, scope, generation, page)
        hit = await load_entry(self._store, key, model)
        if hit is not None:
            return Cached(value=hit, cached=True)

        value = await loader()
        await store_entry(self._store, key, value, self._ttl)
        return Cached(value=value, cached=False)
