"""Domain models and cache scopes for pf_expense."""

from dataclasses import dataclass, field
from datetime import date, datetime

from src.pf_cache.domain.keys import item_key
from src.pf_cache.domain.models import CacheScope

TOTAL_AGGREGATE = "total"
SINGLE_EXPENSE_KIND = "expense"

# Every expense of a user, newest first, with a running total.
ALL_EXPENSES_SCOPE = CacheScope("expenses", aggregates=(TOTAL_AGGREGATE,))


def category_expenses_scope(category_id: str) -> CacheScope:
    """Expenses of one category, with their own generation and total."""
    return CacheScope(
        "expenses",
        filters=(("category", category_id),),
        aggregates=(TOTAL_AGGREGATE,),
    )


def affected_scopes(*category_ids: str) -> list[CacheScope]:
    """Scopes a write touching expenses in these categories must invalidate."""
    return [ALL_EXPENSES_SCOPE, *(category_expenses_scope(c) for c in category_ids)]


def expense_item_key(user_id: str, expense_id: str) -> str:
    return item_key(user_id, SINGLE_EXPENSE_KIND, expense_id)


@dataclass
class ExpenseDraft:
    """Validated input for an insert or a full update."""

    category_id: str
    amount_cents: int
    description: str
    expense_date: date
    payment_method: str | None = None
    is_recurring: bool = False
    tags: list[str] = field(default_factory=list)


@dataclass
class Expense:
    id: str
    user_id: str
    category_id: str
    amount_cents: int
    description: str
    expense_date: date
    payment_method: str | None
    is_recurring: bool
    tags: list[str]
    created_at: datetime
    updated_at: datetime


@dataclass
class DeletedExpense:
    id: str
    category_id: str
