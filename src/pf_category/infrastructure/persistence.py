"""CategoryRepository — concrete implementation of CategoryRepositoryProtocol.

All queries use raw text() SQL (no ORM). Names are unique per user
(uq_categories_user_name); a violation becomes CategoryNameExistsError.
"""

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.pf_category.domain.models import Category
from src.pf_common.database import UNIQUE_VIOLATION, constraint_code
from src.pf_common.errors import CategoryNameExistsError

_INSERT_CATEGORY_SQL = text("""
    INSERT INTO categories (user_id, name, description)
    VALUES (:user_id, :name, :description)
    RETURNING id, user_id, name, description, created_at, updated_at
""")

_LIST_CATEGORIES_SQL = text("""
    SELECT id, user_id, name, description, created_at, updated_at
    FROM categories
    WHERE user_id = :user_id
    ORDER BY created_at DESC, id DESC
    LIMIT :limit OFFSET :offset
""")


def _row_to_category(row: object) -> Category:
    return Category(
        id=str(row.id),  # type: ignore[attr-defined]
        user_id=str(row.user_id),  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class CategoryRepository:
    async def insert_category(
        self,
        db: AsyncSession,
        user_id: str,
        name: str,
        description: str | None,
    ) -> Category:
        try:
            result = await db.execute(
                _INSERT_CATEGORY_SQL,
                {"user_id": user_id, "name": name, "description": description},
            )
        except IntegrityError as e:
            if constraint_code(e) == UNIQUE_VIOLATION:
                raise CategoryNameExistsError(name) from e
            raise
        return _row_to_category(result.one())

    async def list_categories(
        self,
        db: AsyncSession,
        user_id: str,
        limit: int,
        offset: int,
    ) -> list[Category]:
        result = await db.execute(
            _LIST_CATEGORIES_SQL,
            {"user_id": user_id, "limit": limit, "offset": offset},
        )
        return [_row_to_category(row) for row in result.fetchall()]
