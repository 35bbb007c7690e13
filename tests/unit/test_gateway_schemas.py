"""Unit tests for pf_gateway and pf_expense Pydantic schemas."""

from datetime import UTC, date, datetime

import pytest
from pydantic import ValidationError

from src.pf_expense.application.schemas import ExpenseItem, ExpenseRequest, ExpenseTotal
from src.pf_expense.domain.models import Expense
from src.pf_gateway.user.models import User
from src.pf_gateway.user.schemas import AuthResponse, RegisterRequest, UserInfo


class TestRegisterRequest:
    def test_valid_input(self) -> None:
        req = RegisterRequest(name="Alice", email="alice@example.com", password="TestPass123!")
        assert req.name == "Alice"

    def test_invalid_email(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(name="Alice", email="not-an-email", password="TestPass123!")

    def test_missing_password(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(name="Alice", email="alice@example.com")  # type: ignore[call-arg]


class TestAuthResponse:
    def test_defaults(self) -> None:
        user = User(id="u1", email="a@b.com", name="Alice", created_at=datetime.now(UTC))
        resp = AuthResponse(access_token="a", refresh_token="r", user=UserInfo.from_domain(user))
        assert resp.token_type == "Bearer"
        assert resp.expires_in == 15 * 60


class TestExpenseSchemas:
    def test_request_rejects_bad_category_id(self) -> None:
        with pytest.raises(ValidationError):
            ExpenseRequest(
                amount_cents=100,
                description="x",
                category_id="nope",
                expense_date=date(2026, 1, 1),
            )

    def test_request_rejects_too_many_tags(self) -> None:
        with pytest.raises(ValidationError):
            ExpenseRequest(
                amount_cents=100,
                description="x",
                category_id="0b6f5a2e-3f3c-4c8e-9a51-0c1f8a6c2d11",
                expense_date=date(2026, 1, 1),
                tags=[f"t{i}" for i in range(21)],
            )

    def test_item_carries_display_amount(self) -> None:
        now = datetime.now(UTC)
        expense = Expense(
            id="e1",
            user_id="u1",
            category_id="c1",
            amount_cents=1999,
            description="Books",
            expense_date=date(2026, 1, 1),
            payment_method="card",
            is_recurring=False,
            tags=[],
            created_at=now,
            updated_at=now,
        )
        item = ExpenseItem.from_domain(expense)
        assert item.amount_display == "19.99"
        assert item.updated_at == now.isoformat()

    def test_total_from_cents(self) -> None:
        assert ExpenseTotal.from_cents(1500).total_display == "15.00"
