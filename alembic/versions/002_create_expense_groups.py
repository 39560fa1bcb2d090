"""002: create expense_groups and group_members tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE expense_groups (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            name            VARCHAR(255)    NOT NULL,
            description     TEXT,
            created_by      VARCHAR(64)     NOT NULL REFERENCES users (id),
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_expense_groups_updated_at
            BEFORE UPDATE ON expense_groups
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("""
        CREATE TABLE group_members (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            group_id        VARCHAR(64)     NOT NULL REFERENCES expense_groups (id),
            user_id         VARCHAR(64)     NOT NULL REFERENCES users (id),
            added_by        VARCHAR(64)     REFERENCES users (id),
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            joined_at       TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_group_members_group_user UNIQUE (group_id, user_id)
        );
    """)
    op.execute("CREATE INDEX idx_group_members_user ON group_members (user_id) WHERE is_active;")
    op.execute("COMMENT ON COLUMN group_members.is_active IS 'FALSE = removed member; history kept';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS group_members CASCADE;")
    op.execute("DROP TABLE IF EXISTS expense_groups CASCADE;")
