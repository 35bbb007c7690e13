"""Read/write of individual cache entries with graceful degradation.

The cache is an optimization, never a source of truth: a store failure or a
corrupt payload on the read path is logged and treated as a miss.
"""

import logging
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from src.pf_common.kv_store import KeyValueStore, KeyValueStoreError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


async def load_entry(store: KeyValueStore, key: str, model: type[M]) -> M | None:
    """Return the cached model under key, or None on miss/failure."""
    try:
        raw = await store.get(key)
    except KeyValueStoreError:
        logger.warning("Cache read failed, falling back to database: key=%s", key, exc_info=True)
        return None
    if raw is None:
        return None
    try:
        return model.model_validate_json(raw)
    except ValidationError:
        logger.warning("Discarding undecodable cache entry: key=%s", key)
        return None


async def store_entry(store: KeyValueStore, key: str, value: BaseModel, ttl_seconds: int) -> None:
    """Populate key; a failure only costs the next reader a miss."""
    try:
        await store.set(key, value.model_dump_json(), ttl_seconds)
    except KeyValueStoreError:
        logger.warning("Cache populate failed: key=%s", key, exc_info=True)
