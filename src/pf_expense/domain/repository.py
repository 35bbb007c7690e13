"""Repository Protocol — dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pf_expense.domain.models import DeletedExpense, Expense, ExpenseDraft


class ExpenseRepositoryProtocol(Protocol):
    async def insert_expense(
        self, db: AsyncSession, user_id: str, draft: ExpenseDraft
    ) -> Expense: ...

    async def update_expense(
        self, db: AsyncSession, user_id: str, expense_id: str, draft: ExpenseDraft
    ) -> tuple[Expense, str] | None:
        """Return (updated expense, previous category id), or None if not found."""
        ...

    async def delete_expense(
        self, db: AsyncSession, user_id: str, expense_id: str
    ) -> DeletedExpense | None: ...

    async def get_expense(
        self, db: AsyncSession, user_id: str, expense_id: str
    ) -> Expense | None: ...

    async def list_expenses(
        self,
        db: AsyncSession,
        user_id: str,
        category_id: str | None,
        limit: int,
        offset: int,
    ) -> list[Expense]: ...

    async def sum_expenses(
        self, db: AsyncSession, user_id: str, category_id: str | None
    ) -> int: ...
