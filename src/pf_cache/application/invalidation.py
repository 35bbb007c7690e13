"""Write-path invalidation.

For every scope a write touches: INCR its generation counter and DEL its
aggregate keys. Single-item keys named by the caller are deleted too. All
of it runs as one MULTI/EXEC so no reader can see a new generation next to
a stale aggregate.

Ordering with the relational write: the row change is made first (not yet
committed), then the cache is invalidated, then the transaction commits.
An invalidation failure aborts the write; an uninvalidated commit would
serve stale data past the TTL.
"""

import logging
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from src.pf_cache.domain.keys import aggregate_key, generation_key
from src.pf_cache.domain.models import CacheScope
from src.pf_common.errors import InternalError
from src.pf_common.kv_store import KeyValueStore, KeyValueStoreError, KvBatch

logger = logging.getLogger(__name__)


class CacheInvalidator:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def build_batch(
        self,
        user_id: str,
        scopes: Iterable[CacheScope],
        item_keys: Iterable[str] = (),
    ) -> KvBatch:
        batch = KvBatch()
        for key in dict.fromkeys(item_keys):
            batch.delete(key)
        for scope in dict.fromkeys(scopes):
            batch.incr(generation_key(user_id, scope))
            for aggregate in scope.aggregates:
                batch.delete(aggregate_key(user_id, scope, aggregate))
        return batch

    async def invalidate(
        self,
        user_id: str,
        scopes: Iterable[CacheScope],
        item_keys: Iterable[str] = (),
    ) -> None:
        """Apply the invalidation batch. Raises KeyValueStoreError on failure."""
        batch = self.build_batch(user_id, scopes, item_keys)
        if not batch:
            return
        await self._store.batch(batch)
        logger.debug("Invalidated %d cache ops for user=%s", len(batch), user_id)

    async def invalidate_and_commit(
        self,
        db: AsyncSession,
        user_id: str,
        scopes: Iterable[CacheScope],
        item_keys: Iterable[str] = (),
    ) -> None:
        """Invalidate, then commit. The caller rolls back on any exception."""
        try:
            await self.invalidate(user_id, scopes, item_keys)
        except KeyValueStoreError as e:
            logger.error(
                "Cache invalidation failed, aborting write: user=%s", user_id, exc_info=True
            )
            raise InternalError() from e
        await db.commit()
