"""In-memory doubles for the key-value store and repositories.

Each double implements the corresponding Protocol; writes are visible
immediately (there is no transaction to commit).
"""

import dataclasses
import itertools
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock

import pytest

from src.pf_category.domain.models import Category
from src.pf_common.errors import (
    CategoryNameExistsError,
    DuplicateEmailError,
    ForeignKeyNotFoundError,
)
from src.pf_common.kv_store import KeyValueStoreError, KvBatch, KvOp
from src.pf_expense.domain.models import DeletedExpense, Expense, ExpenseDraft
from src.pf_gateway.user.models import User, UserCredentials

_EPOCH = datetime(2026, 1, 1, tzinfo=UTC)


class InMemoryKeyValueStore:
    """KeyValueStore double. `down` fails every call, `fail_batches` only batches."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.batches: list[list[KvOp]] = []
        self.down = False
        self.fail_batches = False

    def _check(self) -> None:
        if self.down:
            raise KeyValueStoreError("simulated outage")

    def _apply(self, op: KvOp) -> Any:
        if op.command == "get":
            return self.data.get(op.key)
        if op.command == "set":
            self.data[op.key] = op.value  # type: ignore[assignment]
            self.ttls[op.key] = op.ttl_seconds  # type: ignore[assignment]
            return None
        if op.command == "set_if_absent":
            if op.key in self.data:
                return False
            self.data[op.key] = op.value  # type: ignore[assignment]
            return True
        if op.command == "incr":
            value = int(self.data.get(op.key, "0")) + op.delta
            self.data[op.key] = str(value)
            return value
        if op.command == "delete":
            self.ttls.pop(op.key, None)
            return 1 if self.data.pop(op.key, None) is not None else 0
        if op.command == "exists":
            return op.key in self.data
        raise ValueError(op.command)

    async def get(self, key: str) -> str | None:
        self._check()
        return self._apply(KvOp("get", key))

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._check()
        self._apply(KvOp("set", key, value=value, ttl_seconds=ttl_seconds))

    async def set_if_absent(self, key: str, value: str) -> bool:
        self._check()
        return self._apply(KvOp("set_if_absent", key, value=value))

    async def incr(self, key: str, delta: int = 1) -> int:
        self._check()
        return self._apply(KvOp("incr", key, delta=delta))

    async def delete(self, *keys: str) -> int:
        self._check()
        return sum(self._apply(KvOp("delete", k)) for k in keys)

    async def exists(self, key: str) -> bool:
        self._check()
        return self._apply(KvOp("exists", key))

    async def batch(self, batch: KvBatch) -> list[Any]:
        self._check()
        if self.fail_batches:
            raise KeyValueStoreError("simulated MULTI/EXEC failure")
        self.batches.append(list(batch.ops))
        return [self._apply(op) for op in batch.ops]


class InMemoryUserRepository:
    def __init__(self) -> None:
        self.users: dict[str, UserCredentials] = {}

    async def insert_user(self, db: Any, email: str, name: str, password_hash: str) -> User:
        if any(u.email == email for u in self.users.values()):
            raise DuplicateEmailError()
        creds = UserCredentials(
            id=str(uuid.uuid4()),
            email=email,
            name=name,
            password_hash=password_hash,
            created_at=_EPOCH,
        )
        self.users[creds.id] = creds
        return creds.to_user()

    async def get_credentials_by_email(self, db: Any, email: str) -> UserCredentials | None:
        return next((u for u in self.users.values() if u.email == email), None)

    async def get_user_by_id(self, db: Any, user_id: str) -> User | None:
        creds = self.users.get(user_id)
        return creds.to_user() if creds else None


class InMemoryCategoryRepository:
    def __init__(self) -> None:
        self.categories: dict[str, Category] = {}
        self.list_calls = 0
        self._clock = itertools.count(1)

    async def insert_category(
        self, db: Any, user_id: str, name: str, description: str | None
    ) -> Category:
        if any(c.user_id == user_id and c.name == name for c in self.categories.values()):
            raise CategoryNameExistsError(name)
        now = _EPOCH + timedelta(seconds=next(self._clock))
        category = Category(
            id=str(uuid.uuid4()),
            user_id=user_id,
            name=name,
            description=description,
            created_at=now,
            updated_at=now,
        )
        self.categories[category.id] = category
        return category

    async def list_categories(
        self, db: Any, user_id: str, limit: int, offset: int
    ) -> list[Category]:
        self.list_calls += 1
        rows = sorted(
            (c for c in self.categories.values() if c.user_id == user_id),
            key=lambda c: (c.created_at, c.id),
            reverse=True,
        )
        return rows[offset : offset + limit]


class InMemoryExpenseRepository:
    def __init__(self) -> None:
        self.category_owners: dict[str, str] = {}
        self.expenses: dict[str, Expense] = {}
        self.list_calls = 0
        self.sum_calls = 0
        self._clock = itertools.count(1)

    def add_category(self, user_id: str) -> str:
        category_id = str(uuid.uuid4())
        self.category_owners[category_id] = user_id
        return category_id

    def _now(self) -> datetime:
        return _EPOCH + timedelta(seconds=next(self._clock))

    def _owns(self, user_id: str, category_id: str) -> bool:
        return self.category_owners.get(category_id) == user_id

    async def insert_expense(self, db: Any, user_id: str, draft: ExpenseDraft) -> Expense:
        if not self._owns(user_id, draft.category_id):
            raise ForeignKeyNotFoundError()
        now = self._now()
        expense = Expense(
            id=str(uuid.uuid4()),
            user_id=user_id,
            category_id=draft.category_id,
            amount_cents=draft.amount_cents,
            description=draft.description,
            expense_date=draft.expense_date,
            payment_method=draft.payment_method,
            is_recurring=draft.is_recurring,
            tags=list(draft.tags),
            created_at=now,
            updated_at=now,
        )
        self.expenses[expense.id] = expense
        return dataclasses.replace(expense)

    async def update_expense(
        self, db: Any, user_id: str, expense_id: str, draft: ExpenseDraft
    ) -> tuple[Expense, str] | None:
        current = self.expenses.get(expense_id)
        if current is None or current.user_id != user_id:
            return None
        if not self._owns(user_id, draft.category_id):
            raise ForeignKeyNotFoundError()
        updated = dataclasses.replace(
            current,
            category_id=draft.category_id,
            amount_cents=draft.amount_cents,
            description=draft.description,
            expense_date=draft.expense_date,
            payment_method=draft.payment_method,
            is_recurring=draft.is_recurring,
            tags=list(draft.tags),
            updated_at=self._now(),
        )
        self.expenses[expense_id] = updated
        return dataclasses.replace(updated), current.category_id

    async def delete_expense(
        self, db: Any, user_id: str, expense_id: str
    ) -> DeletedExpense | None:
        current = self.expenses.get(expense_id)
        if current is None or current.user_id != user_id:
            return None
        del self.expenses[expense_id]
        return DeletedExpense(id=current.id, category_id=current.category_id)

    async def get_expense(self, db: Any, user_id: str, expense_id: str) -> Expense | None:
        current = self.expenses.get(expense_id)
        if current is None or current.user_id != user_id:
            return None
        return dataclasses.replace(current)

    def _matching(self, user_id: str, category_id: str | None) -> list[Expense]:
        return [
            e
            for e in self.expenses.values()
            if e.user_id == user_id and (category_id is None or e.category_id == category_id)
        ]

    async def list_expenses(
        self, db: Any, user_id: str, category_id: str | None, limit: int, offset: int
    ) -> list[Expense]:
        self.list_calls += 1
        rows = sorted(
            self._matching(user_id, category_id),
            key=lambda e: (e.updated_at, e.id),
            reverse=True,
        )
        return [dataclasses.replace(e) for e in rows[offset : offset + limit]]

    async def sum_expenses(self, db: Any, user_id: str, category_id: str | None) -> int:
        self.sum_calls += 1
        return sum(e.amount_cents for e in self._matching(user_id, category_id))


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def category_repo() -> InMemoryCategoryRepository:
    return InMemoryCategoryRepository()


@pytest.fixture
def expense_repo() -> InMemoryExpenseRepository:
    return InMemoryExpenseRepository()
