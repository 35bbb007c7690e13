"""ExpenseRepository — concrete implementation of ExpenseRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg parameter pattern: CAST(:param AS TYPE) wherever PostgreSQL cannot
infer the type (select lists, IS NULL checks).

Category ownership is enforced in SQL: an expense can only reference a
category of the same user, otherwise ForeignKeyNotFoundError is raised.
"""

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.pf_common.database import (
    FOREIGN_KEY_VIOLATION,
    NOT_NULL_VIOLATION,
    constraint_code,
)
from src.pf_common.errors import ForeignKeyNotFoundError, RequiredFieldMissingError
from src.pf_expense.domain.models import DeletedExpense, Expense, ExpenseDraft

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_EXPENSE_COLUMNS = """
    id, user_id, category_id, amount_cents, description, expense_date,
    payment_method, is_recurring, tags, created_at, updated_at
"""

_INSERT_EXPENSE_SQL = text(f"""
    INSERT INTO expenses (
        user_id, category_id, amount_cents, description, expense_date,
        payment_method, is_recurring, tags
    )
    SELECT c.user_id, c.id,
           CAST(:amount_cents AS BIGINT),
           CAST(:description AS TEXT),
           CAST(:expense_date AS DATE),
           CAST(:payment_method AS TEXT),
           CAST(:is_recurring AS BOOLEAN),
           CAST(:tags AS TEXT[])
    FROM categories c
    WHERE c.id = CAST(:category_id AS UUID)
      AND c.user_id = CAST(:user_id AS UUID)
    RETURNING {_EXPENSE_COLUMNS}
""")

_UPDATE_EXPENSE_SQL = text("""
    UPDATE expenses AS e
    SET category_id    = CAST(:category_id AS UUID),
        amount_cents   = CAST(:amount_cents AS BIGINT),
        description    = CAST(:description AS TEXT),
        expense_date   = CAST(:expense_date AS DATE),
        payment_method = CAST(:payment_method AS TEXT),
        is_recurring   = CAST(:is_recurring AS BOOLEAN),
        tags           = CAST(:tags AS TEXT[]),
        updated_at     = NOW()
    FROM (
        SELECT id, category_id
        FROM expenses
        WHERE id = CAST(:expense_id AS UUID)
          AND user_id = CAST(:user_id AS UUID)
        FOR UPDATE
    ) AS prev
    WHERE e.id = prev.id
      AND EXISTS (
        SELECT 1 FROM categories c
        WHERE c.id = CAST(:category_id AS UUID)
          AND c.user_id = CAST(:user_id AS UUID)
      )
    RETURNING e.id, e.user_id, e.category_id, e.amount_cents, e.description,
              e.expense_date, e.payment_method, e.is_recurring, e.tags,
              e.created_at, e.updated_at,
              prev.category_id AS previous_category_id
""")

_EXPENSE_EXISTS_SQL = text("""
    SELECT 1 FROM expenses
    WHERE id = CAST(:expense_id AS UUID)
      AND user_id = CAST(:user_id AS UUID)
""")

_DELETE_EXPENSE_SQL = text("""
    DELETE FROM expenses
    WHERE id = CAST(:expense_id AS UUID)
      AND user_id = CAST(:user_id AS UUID)
    RETURNING id, category_id
""")

_GET_EXPENSE_SQL = text(f"""
    SELECT {_EXPENSE_COLUMNS}
    FROM expenses
    WHERE id = CAST(:expense_id AS UUID)
      AND user_id = CAST(:user_id AS UUID)
""")

_LIST_EXPENSES_SQL = text(f"""
    SELECT {_EXPENSE_COLUMNS}
    FROM expenses
    WHERE user_id = CAST(:user_id AS UUID)
      AND (CAST(:category_id AS UUID) IS NULL OR category_id = CAST(:category_id AS UUID))
    ORDER BY updated_at DESC, id DESC
    LIMIT :limit OFFSET :offset
""")

_SUM_EXPENSES_SQL = text("""
    SELECT COALESCE(SUM(amount_cents), 0) AS total
    FROM expenses
    WHERE user_id = CAST(:user_id AS UUID)
      AND (CAST(:category_id AS UUID) IS NULL OR category_id = CAST(:category_id AS UUID))
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_expense(row: object) -> Expense:
    return Expense(
        id=str(row.id),  # type: ignore[attr-defined]
        user_id=str(row.user_id),  # type: ignore[attr-defined]
        category_id=str(row.category_id),  # type: ignore[attr-defined]
        amount_cents=row.amount_cents,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        expense_date=row.expense_date,  # type: ignore[attr-defined]
        payment_method=row.payment_method,  # type: ignore[attr-defined]
        is_recurring=row.is_recurring,  # type: ignore[attr-defined]
        tags=list(row.tags or []),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _draft_params(user_id: str, draft: ExpenseDraft) -> dict[str, object]:
    return {
        "user_id": user_id,
        "category_id": draft.category_id,
        "amount_cents": draft.amount_cents,
        "description": draft.description,
        "expense_date": draft.expense_date,
        "payment_method": draft.payment_method,
        "is_recurring": draft.is_recurring,
        "tags": draft.tags,
    }


def _translate_integrity_error(e: IntegrityError) -> Exception:
    code = constraint_code(e)
    if code == FOREIGN_KEY_VIOLATION:
        return ForeignKeyNotFoundError()
    if code == NOT_NULL_VIOLATION:
        return RequiredFieldMissingError()
    return e


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ExpenseRepository:
    async def insert_expense(
        self, db: AsyncSession, user_id: str, draft: ExpenseDraft
    ) -> Expense:
        try:
            result = await db.execute(_INSERT_EXPENSE_SQL, _draft_params(user_id, draft))
        except IntegrityError as e:
            translated = _translate_integrity_error(e)
            if translated is e:
                raise
            raise translated from e
        row = result.fetchone()
        if row is None:
            # No category row of this user matched the INSERT ... SELECT
            raise ForeignKeyNotFoundError()
        return _row_to_expense(row)

    async def update_expense(
        self, db: AsyncSession, user_id: str, expense_id: str, draft: ExpenseDraft
    ) -> tuple[Expense, str] | None:
        params = _draft_params(user_id, draft)
        params["expense_id"] = expense_id
        try:
            result = await db.execute(_UPDATE_EXPENSE_SQL, params)
        except IntegrityError as e:
            translated = _translate_integrity_error(e)
            if translated is e:
                raise
            raise translated from e
        row = result.fetchone()
        if row is not None:
            return _row_to_expense(row), str(row.previous_category_id)

        exists = await db.execute(
            _EXPENSE_EXISTS_SQL, {"expense_id": expense_id, "user_id": user_id}
        )
        if exists.fetchone() is not None:
            raise ForeignKeyNotFoundError()
        return None

    async def delete_expense(
        self, db: AsyncSession, user_id: str, expense_id: str
    ) -> DeletedExpense | None:
        result = await db.execute(
            _DELETE_EXPENSE_SQL, {"expense_id": expense_id, "user_id": user_id}
        )
        row = result.fetchone()
        if row is None:
            return None
        return DeletedExpense(id=str(row.id), category_id=str(row.category_id))

    async def get_expense(
        self, db: AsyncSession, user_id: str, expense_id: str
    ) -> Expense | None:
        result = await db.execute(
            _GET_EXPENSE_SQL, {"expense_id": expense_id, "user_id": user_id}
        )
        row = result.fetchone()
        return _row_to_expense(row) if row is not None else None

    async def list_expenses(
        self,
        db: AsyncSession,
        user_id: str,
        category_id: str | None,
        limit: int,
        offset: int,
    ) -> list[Expense]:
        result = await db.execute(
            _LIST_EXPENSES_SQL,
            {
                "user_id": user_id,
                "category_id": category_id,
                "limit": limit,
                "offset": offset,
            },
        )
        return [_row_to_expense(row) for row in result.fetchall()]

    async def sum_expenses(
        self, db: AsyncSession, user_id: str, category_id: str | None
    ) -> int:
        result = await db.execute(
            _SUM_EXPENSES_SQL, {"user_id": user_id, "category_id": category_id}
        )
        return int(result.scalar_one())
