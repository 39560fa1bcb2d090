"""003: create group_expenses and expense_splits tables

Revision ID: 003
Revises: 002
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE group_expenses (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            group_id        VARCHAR(64)     NOT NULL REFERENCES expense_groups (id),
            description     VARCHAR(500)    NOT NULL,
            total_amount    NUMERIC(12, 2)  NOT NULL,
            paid_by         VARCHAR(64)     NOT NULL REFERENCES users (id),
            category        VARCHAR(50)     NOT NULL DEFAULT 'other',
            expense_date    DATE            NOT NULL DEFAULT CURRENT_DATE,
            notes           TEXT,
            is_settled      BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_group_expenses_amount_gt_0 CHECK (total_amount > 0)
        );
    """)
    op.execute("CREATE INDEX idx_group_expenses_group_date ON group_expenses (group_id, expense_date DESC);")
    op.execute("""
        CREATE TRIGGER trg_group_expenses_updated_at
            BEFORE UPDATE ON group_expenses
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("""
        CREATE TABLE expense_splits (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            expense_id      VARCHAR(64)     NOT NULL REFERENCES group_expenses (id) ON DELETE CASCADE,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users (id),
            amount_owed     NUMERIC(12, 2)  NOT NULL,
            is_paid         BOOLEAN         NOT NULL DEFAULT FALSE,
            paid_at         TIMESTAMPTZ,
            marked_paid_by  VARCHAR(64)     REFERENCES users (id),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_expense_splits_expense_user UNIQUE (expense_id, user_id),
            CONSTRAINT ck_expense_splits_amount_gte_0 CHECK (amount_owed >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_expense_splits_user ON expense_splits (user_id);")
    op.execute("COMMENT ON TABLE expense_splits IS 'One row per participant per expense; amounts in currency units';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS expense_splits CASCADE;")
    op.execute("DROP TABLE IF EXISTS group_expenses CASCADE;")
