"""Repository Protocol — dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pf_category.domain.models import Category


class CategoryRepositoryProtocol(Protocol):
    async def insert_category(
        self,
        db: AsyncSession,
        user_id: str,
        name: str,
        description: str | None,
    ) -> Category: ...

    async def list_categories(
        self,
        db: AsyncSession,
        user_id: str,
        limit: int,
        offset: int,
    ) -> list[Category]: ...
