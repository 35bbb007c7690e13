"""003: create expenses table

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE expenses (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id         UUID            NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            category_id     UUID            NOT NULL REFERENCES categories (id),
            amount_cents    BIGINT          NOT NULL,
            description     VARCHAR(255)    NOT NULL,
            expense_date    DATE            NOT NULL,
            payment_method  VARCHAR(50),
            is_recurring    BOOLEAN         NOT NULL DEFAULT FALSE,
            tags            TEXT[]          NOT NULL DEFAULT '{}',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_expenses_amount_positive CHECK (amount_cents > 0)
        );
    """)
    op.execute(
        "CREATE INDEX idx_expenses_user_updated ON expenses (user_id, updated_at DESC, id DESC);"
    )
    op.execute(
        "CREATE INDEX idx_expenses_user_category_updated "
        "ON expenses (user_id, category_id, updated_at DESC, id DESC);"
    )
    op.execute("""
        CREATE TRIGGER trg_expenses_updated_at
            BEFORE UPDATE ON expenses
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS expenses CASCADE;")
