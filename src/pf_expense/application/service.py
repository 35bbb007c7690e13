"""ExpenseApplicationService — expense writes and cached reads.

Writes:  validate -> SQL write (uncommitted) -> invalidate -> COMMIT.
         Any exception, including a failed invalidation, rolls back.
Reads:   list pages via VersionedCache (generation rotation),
         single expenses and totals via DirectCache (explicit deletion).

Scopes touched by a write: all expenses, plus the category scope of every
category the expense belonged to before or after the write.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pf_cache.application.direct import DirectCache
from src.pf_cache.application.invalidation import CacheInvalidator
from src.pf_cache.application.versioned import VersionedCache
from src.pf_cache.domain.keys import aggregate_key
from src.pf_cache.domain.models import CacheScope, Cached
from src.pf_common.cents import validate_amount
from src.pf_common.errors import (
    ExpenseNotFoundError,
    InvalidAmountError,
    InvalidDescriptionError,
)
from src.pf_common.kv_store import KeyValueStore
from src.pf_expense.application.schemas import (
    DeleteExpenseResponse,
    ExpenseItem,
    ExpensePage,
    ExpenseRequest,
    ExpenseTotal,
)
from src.pf_expense.domain.models import (
    ALL_EXPENSES_SCOPE,
    TOTAL_AGGREGATE,
    ExpenseDraft,
    affected_scopes,
    category_expenses_scope,
    expense_item_key,
)
from src.pf_expense.domain.repository import ExpenseRepositoryProtocol
from src.pf_expense.infrastructure.persistence import ExpenseRepository

DESCRIPTION_MAX_LENGTH = 255


def to_draft(req: ExpenseRequest) -> ExpenseDraft:
    """Validate a request body before any store call."""
    try:
        validate_amount(req.amount_cents)
    except ValueError as e:
        raise InvalidAmountError() from e
    description = req.description.strip()
    if not description:
        raise InvalidDescriptionError("Description is required")
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise InvalidDescriptionError(
            f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters"
        )
    tags = [t.strip() for t in (req.tags or []) if t.strip()]
    return ExpenseDraft(
        category_id=str(req.category_id),
        amount_cents=req.amount_cents,
        description=description,
        expense_date=req.expense_date,
        payment_method=req.payment_method,
        is_recurring=req.is_recurring,
        tags=tags,
    )


class ExpenseApplicationService:
    def __init__(self, repo: ExpenseRepositoryProtocol | None = None) -> None:
        self._repo: ExpenseRepositoryProtocol = repo or ExpenseRepository()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def add_expense(
        self, db: AsyncSession, kv: KeyValueStore, user_id: str, req: ExpenseRequest
    ) -> ExpenseItem:
        draft = to_draft(req)
        try:
            expense = await self._repo.insert_expense(db, user_id, draft)
            await CacheInvalidator(kv).invalidate_and_commit(
                db, user_id, affected_scopes(expense.category_id)
            )
        except Exception:
            await db.rollback()
            raise
        return ExpenseItem.from_domain(expense)

    async def edit_expense(
        self,
        db: AsyncSession,
        kv: KeyValueStore,
        user_id: str,
        expense_id: str,
        req: ExpenseRequest,
    ) -> ExpenseItem:
        draft = to_draft(req)
        try:
            updated = await self._repo.update_expense(db, user_id, expense_id, draft)
            if updated is None:
                raise ExpenseNotFoundError(expense_id)
            expense, previous_category_id = updated
            await CacheInvalidator(kv).invalidate_and_commit(
                db,
                user_id,
                affected_scopes(previous_category_id, expense.category_id),
                [expense_item_key(user_id, expense_id)],
            )
        except Exception:
            await db.rollback()
            raise
        return ExpenseItem.from_domain(expense)

    async def delete_expense(
        self, db: AsyncSession, kv: KeyValueStore, user_id: str, expense_id: str
    ) -> DeleteExpenseResponse:
        try:
            deleted = await self._repo.delete_expense(db, user_id, expense_id)
            if deleted is None:
                raise ExpenseNotFoundError(expense_id)
            await CacheInvalidator(kv).invalidate_and_commit(
                db,
                user_id,
                affected_scopes(deleted.category_id),
                [expense_item_key(user_id, expense_id)],
            )
        except Exception:
            await db.rollback()
            raise
        return DeleteExpenseResponse(id=deleted.id, message=f"Expense deleted: {deleted.id}")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_expense(
        self, db: AsyncSession, kv: KeyValueStore, user_id: str, expense_id: str
    ) -> Cached[ExpenseItem]:
        async def load() -> ExpenseItem:
            expense = await self._repo.get_expense(db, user_id, expense_id)
            if expense is None:
                raise ExpenseNotFoundError(expense_id)
            return ExpenseItem.from_domain(expense)

        return await DirectCache(kv).get_or_load(
            expense_item_key(user_id, expense_id), load, ExpenseItem
        )

    async def get_total(
        self, db: AsyncSession, kv: KeyValueStore, user_id: str
    ) -> Cached[ExpenseTotal]:
        return await self._total(db, kv, user_id, ALL_EXPENSES_SCOPE, None)

    async def list_expenses(
        self, db: AsyncSession, kv: KeyValueStore, user_id: str, page: int
    ) -> Cached[ExpensePage]:
        return await self._page(db, kv, user_id, ALL_EXPENSES_SCOPE, None, page)

    async def filter_by_category(
        self,
        db: AsyncSession,
        kv: KeyValueStore,
        user_id: str,
        category_id: str,
        page: int,
    ) -> Cached[ExpensePage]:
        scope = category_expenses_scope(category_id)
        return await self._page(db, kv, user_id, scope, category_id, page)

    async def _total(
        self,
        db: AsyncSession,
        kv: KeyValueStore,
        user_id: str,
        scope: CacheScope,
        category_id: str | None,
    ) -> Cached[ExpenseTotal]:
        async def load() -> ExpenseTotal:
            total = await self._repo.sum_expenses(db, user_id, category_id)
            return ExpenseTotal.from_cents(total)

        key = aggregate_key(user_id, scope, TOTAL_AGGREGATE)
        return await DirectCache(kv).get_or_load(key, load, ExpenseTotal)

    async def _page(
        self,
        db: AsyncSession,
        kv: KeyValueStore,
        user_id: str,
        scope: CacheScope,
        category_id: str | None,
        page: int,
    ) -> Cached[ExpensePage]:
        page = max(page, 1)
        limit = settings.PAGE_SIZE

        async def load() -> ExpensePage:
            # Fetch limit+1 to detect has_more without COUNT(*)
            rows = await self._repo.list_expenses(
                db, user_id, category_id, limit + 1, (page - 1) * limit
            )
            total = (await self._total(db, kv, user_id, scope, category_id)).value
            return ExpensePage(
                expenses=[ExpenseItem.from_domain(e) for e in rows[:limit]],
                page=page,
                has_more=len(rows) > limit,
                total_cents=total.total_cents,
                total_display=total.total_display,
                category_id=category_id,
            )

        return await VersionedCache(kv).resolve(user_id, scope, page, load, ExpensePage)
