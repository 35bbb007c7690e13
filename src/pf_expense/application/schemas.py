"""Pydantic schemas for pf_expense API.

Amounts travel as int cents; every response also carries a display string
("10.00"). The page schema is also the cache payload, so a cache hit
deserializes into exactly what a miss would have returned.
"""

import uuid
from datetime import date

from pydantic import BaseModel, Field

from src.pf_common.cents import cents_to_display
from src.pf_expense.domain.models import Expense

MAX_TAGS = 20

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ExpenseRequest(BaseModel):
    """Body of both create and full update."""

    amount_cents: int = Field(..., description="Amount in cents, > 0")
    description: str = Field(..., max_length=1000)
    category_id: uuid.UUID
    expense_date: date
    payment_method: str | None = Field(None, max_length=50)
    is_recurring: bool = False
    tags: list[str] | None = Field(None, max_length=MAX_TAGS)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ExpenseItem(BaseModel):
    id: str
    category_id: str
    amount_cents: int
    amount_display: str
    description: str
    expense_date: date
    payment_method: str | None
    is_recurring: bool
    tags: list[str]
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, e: Expense) -> "ExpenseItem":
        return cls(
            id=e.id,
            category_id=e.category_id,
            amount_cents=e.amount_cents,
            amount_display=cents_to_display(e.amount_cents),
            description=e.description,
            expense_date=e.expense_date,
            payment_method=e.payment_method,
            is_recurring=e.is_recurring,
            tags=e.tags,
            created_at=e.created_at.isoformat(),
            updated_at=e.updated_at.isoformat(),
        )


class ExpenseTotal(BaseModel):
    total_cents: int
    total_display: str

    @classmethod
    def from_cents(cls, total_cents: int) -> "ExpenseTotal":
        return cls(total_cents=total_cents, total_display=cents_to_display(total_cents))


class ExpensePage(BaseModel):
    expenses: list[ExpenseItem]
    page: int
    has_more: bool
    total_cents: int
    total_display: str
    category_id: str | None = None


class DeleteExpenseResponse(BaseModel):
    id: str
    message: str
