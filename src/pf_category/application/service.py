"""CategoryApplicationService — category writes and cached listing.

Writes follow INSERT -> invalidate -> COMMIT; any failure rolls back.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pf_cache.application.invalidation import CacheInvalidator
from src.pf_cache.application.versioned import VersionedCache
from src.pf_cache.domain.models import Cached
from src.pf_category.application.schemas import CategoryItem, CategoryPage
from src.pf_category.domain.models import CATEGORIES_SCOPE
from src.pf_category.domain.repository import CategoryRepositoryProtocol
from src.pf_category.infrastructure.persistence import CategoryRepository
from src.pf_common.errors import InvalidCategoryNameError
from src.pf_common.kv_store import KeyValueStore

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 30


def validate_category_name(name: str) -> None:
    if not name:
        raise InvalidCategoryNameError("Category name is required")
    if len(name) < NAME_MIN_LENGTH:
        raise InvalidCategoryNameError(
            f"Category name must be at least {NAME_MIN_LENGTH} characters"
        )
    if len(name) > NAME_MAX_LENGTH:
        raise InvalidCategoryNameError(
            f"Category name must be at most {NAME_MAX_LENGTH} characters"
        )


class CategoryApplicationService:
    def __init__(self, repo: CategoryRepositoryProtocol | None = None) -> None:
        self._repo: CategoryRepositoryProtocol = repo or CategoryRepository()

    async def add_category(
        self,
        db: AsyncSession,
        kv: KeyValueStore,
        user_id: str,
        name: str,
        description: str | None = None,
    ) -> CategoryItem:
        name = name.strip()
        validate_category_name(name)
        try:
            category = await self._repo.insert_category(db, user_id, name, description)
            await CacheInvalidator(kv).invalidate_and_commit(db, user_id, [CATEGORIES_SCOPE])
        except Exception:
            await db.rollback()
            raise
        return CategoryItem.from_domain(category)

    async def list_categories(
        self,
        db: AsyncSession,
        kv: KeyValueStore,
        user_id: str,
        page: int,
    ) -> Cached[CategoryPage]:
        page = max(page, 1)
        limit = settings.PAGE_SIZE

        async def load() -> CategoryPage:
            # Fetch limit+1 to detect has_more without COUNT(*)
            rows = await self._repo.list_categories(db, user_id, limit + 1, (page - 1) * limit)
            return CategoryPage(
                categories=[CategoryItem.from_domain(c) for c in rows[:limit]],
                page=page,
                has_more=len(rows) > limit,
            )

        return await VersionedCache(kv).resolve(
            user_id, CATEGORIES_SCOPE, page, load, CategoryPage
        )
