"""ExpenseStore: concrete implementation of ExpenseStoreProtocol.

All queries use raw text() SQL (no ORM) and are read-only.
NUMERIC currency columns are converted to cents here, at the boundary.

Snapshot consistency: open_snapshot() must be the first statement of the
session's transaction. It pins the connection to REPEATABLE READ, so every
following query sees the same database snapshot.
"""

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.gl_balance.domain.models import Expense, Group, Member, Split
from src.gl_common.cents import to_cents

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_GROUP_SQL = text("""
    SELECT id, name, description, created_by, created_at
    FROM expense_groups
    WHERE id = :group_id AND is_active = TRUE
""")

_LIST_ACTIVE_MEMBERS_SQL = text("""
    SELECT user_id
    FROM group_members
    WHERE group_id = :group_id AND is_active = TRUE
    ORDER BY joined_at, user_id
""")

_LIST_EXPENSES_SQL = text("""
    SELECT id, paid_by, total_amount, description, category, expense_date
    FROM group_expenses
    WHERE group_id = :group_id
    ORDER BY expense_date DESC, created_at DESC, id
""")

_LIST_SPLITS_SQL = text("""
    SELECT expense_id, user_id, amount_owed, is_paid
    FROM expense_splits
    WHERE expense_id IN :expense_ids
    ORDER BY expense_id, created_at, id
""").bindparams(bindparam("expense_ids", expanding=True))

_RESOLVE_USERS_SQL = text("""
    SELECT id, full_name, email
    FROM users
    WHERE id IN :user_ids
""").bindparams(bindparam("user_ids", expanding=True))

_LIST_MEMBER_GROUPS_SQL = text("""
    SELECT gm.group_id
    FROM group_members gm
    JOIN expense_groups g ON g.id = gm.group_id
    WHERE gm.user_id = :user_id
      AND gm.is_active = TRUE
      AND g.is_active = TRUE
    ORDER BY g.created_at DESC, g.id
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_group(row: object) -> Group:
    return Group(
        id=str(row.id),  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_by=str(row.created_by),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def _row_to_expense(row: object) -> Expense:
    return Expense(
        id=str(row.id),  # type: ignore[attr-defined]
        payer_id=str(row.paid_by),  # type: ignore[attr-defined]
        total_amount=to_cents(row.total_amount),  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        category=row.category,  # type: ignore[attr-defined]
        expense_date=row.expense_date,  # type: ignore[attr-defined]
    )


def _row_to_split(row: object) -> Split:
    return Split(
        expense_id=str(row.expense_id),  # type: ignore[attr-defined]
        user_id=str(row.user_id),  # type: ignore[attr-defined]
        amount_owed=to_cents(row.amount_owed),  # type: ignore[attr-defined]
        is_paid=bool(row.is_paid),  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ExpenseStore:
    """Concrete store: all operations are read-only SQL queries."""

    async def open_snapshot(self, db: AsyncSession) -> None:
        await db.connection(execution_options={"isolation_level": "REPEATABLE READ"})

    async def get_group(self, db: AsyncSession, group_id: str) -> Group | None:
        result = await db.execute(_GET_GROUP_SQL, {"group_id": group_id})
        row = result.fetchone()
        return _row_to_group(row) if row is not None else None

    async def list_active_members(
        self, db: AsyncSession, group_id: str
    ) -> list[Member]:
        result = await db.execute(_LIST_ACTIVE_MEMBERS_SQL, {"group_id": group_id})
        return [Member(user_id=str(row.user_id)) for row in result.fetchall()]

    async def list_expenses(self, db: AsyncSession, group_id: str) -> list[Expense]:
        result = await db.execute(_LIST_EXPENSES_SQL, {"group_id": group_id})
        return [_row_to_expense(row) for row in result.fetchall()]

    async def list_splits(
        self, db: AsyncSession, expense_ids: list[str]
    ) -> list[Split]:
        if not expense_ids:
            return []
        result = await db.execute(_LIST_SPLITS_SQL, {"expense_ids": expense_ids})
        return [_row_to_split(row) for row in result.fetchall()]

    async def resolve_user_names(
        self, db: AsyncSession, user_ids: list[str]
    ) -> dict[str, tuple[str, str]]:
        """Return {user_id: (full_name, email)}; missing users are simply absent."""
        if not user_ids:
            return {}
        result = await db.execute(_RESOLVE_USERS_SQL, {"user_ids": user_ids})
        return {
            str(row.id): (row.full_name or "", row.email or "")
            for row in result.fetchall()
        }

    async def list_member_group_ids(
        self, db: AsyncSession, user_id: str
    ) -> list[str]:
        result = await db.execute(_LIST_MEMBER_GROUPS_SQL, {"user_id": user_id})
        return [str(row.group_id) for row in result.fetchall()]
