"""Pydantic schemas for pf_category API."""

from pydantic import BaseModel, Field

from src.pf_category.domain.models import Category


class CreateCategoryRequest(BaseModel):
    name: str = Field(..., max_length=100)
    description: str | None = Field(None, max_length=255)


class CategoryItem(BaseModel):
    id: str
    name: str
    description: str | None
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, category: Category) -> "CategoryItem":
        return cls(
            id=category.id,
            name=category.name,
            description=category.description,
            created_at=category.created_at.isoformat(),
            updated_at=category.updated_at.isoformat(),
        )


class CategoryPage(BaseModel):
    categories: list[CategoryItem]
    page: int
    has_more: bool
