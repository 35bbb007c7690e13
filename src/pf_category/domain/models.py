"""Domain models for pf_category — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime

from src.pf_cache.domain.models import CacheScope

# A user's category list; no filters, no aggregates.
CATEGORIES_SCOPE = CacheScope("categories")


@dataclass
class Category:
    id: str
    user_id: str
    name: str
    description: str | None
    created_at: datetime
    updated_at: datetime
