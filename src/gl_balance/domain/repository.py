"""Expense store Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.gl_balance.domain.models import Expense, Group, Member, Split


class ExpenseStoreProtocol(Protocol):
    async def open_snapshot(self, db: AsyncSession) -> None: ...

    async def get_group(self, db: AsyncSession, group_id: str) -> Group | None: ...

    async def list_active_members(
        self, db: AsyncSession, group_id: str
    ) -> list[Member]: ...

    async def list_expenses(
        self, db: AsyncSession, group_id: str
    ) -> list[Expense]: ...

    async def list_splits(
        self, db: AsyncSession, expense_ids: list[str]
    ) -> list[Split]: ...

    async def resolve_user_names(
        self, db: AsyncSession, user_ids: list[str]
    ) -> dict[str, tuple[str, str]]: ...

    async def list_member_group_ids(
        self, db: AsyncSession, user_id: str
    ) -> list[str]: ...
