"""GroupBalanceService: thin composition layer.

Loads a group snapshot through the expense store, runs the pure domain
engine and shapes the result into response schemas. All methods are
read-only: each snapshot read happens inside one REPEATABLE READ
transaction that is rolled back afterwards.
"""

import logging
from dataclasses import replace

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.gl_balance.application.context import render_balance_context
from src.gl_balance.application.schemas import (
    BalanceContextResponse,
    ExpenseItem,
    GroupBalanceReportResponse,
    GroupInfo,
    GroupSummaryResponse,
    MemberItem,
    UserBalanceItem,
    UserDueItem,
    UserDuesResponse,
)
from src.gl_balance.domain.models import Group, GroupBalanceReport, GroupSnapshot
from src.gl_balance.domain.report import build_group_balance_report
from src.gl_balance.domain.repository import ExpenseStoreProtocol
from src.gl_balance.infrastructure.persistence import ExpenseStore
from src.gl_common.cents import cents_to_display
from src.gl_common.errors import (
    GroupNotFoundError,
    MalformedSnapshotError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


class GroupBalanceService:
    def __init__(
        self,
        repo: ExpenseStoreProtocol | None = None,
        epsilon: int | None = None,
        strict: bool | None = None,
        recent_expenses_limit: int | None = None,
    ) -> None:
        self._repo: ExpenseStoreProtocol = repo or ExpenseStore()
        self._epsilon = settings.BALANCE_EPSILON_CENTS if epsilon is None else epsilon
        self._strict = settings.STRICT_SNAPSHOT_VALIDATION if strict is None else strict
        self._recent_limit = (
            settings.RECENT_EXPENSES_LIMIT
            if recent_expenses_limit is None
            else recent_expenses_limit
        )

    # ------------------------------------------------------------------
    # Snapshot loading
    # ------------------------------------------------------------------

    async def _end_read(self, db: AsyncSession) -> None:
        """Roll back the read-only transaction. A failed rollback means the connection is gone."""
        try:
            await db.rollback()
        except SQLAlchemyError as exc:
            logger.error("Rollback after snapshot read failed: %s", exc)
            raise StoreUnavailableError("Lost connection to the expense store") from exc

    async def load_snapshot(
        self, db: AsyncSession, group_id: str
    ) -> tuple[Group | None, GroupSnapshot, dict[str, tuple[str, str]]]:
        """Read group, members, expenses, splits and names in one snapshot.

        Returns (group, snapshot, names) where names covers members and payers.
        Raises StoreUnavailableError on any database failure.
        """
        try:
            await self._repo.open_snapshot(db)
            group = await self._repo.get_group(db, group_id)
            members = await self._repo.list_active_members(db, group_id)
            expenses = await self._repo.list_expenses(db, group_id)
            splits = await self._repo.list_splits(db, [e.id for e in expenses])

            user_ids = list(
                dict.fromkeys([m.user_id for m in members] + [e.payer_id for e in expenses])
            )
            names = await self._repo.resolve_user_names(db, user_ids)
        except SQLAlchemyError as exc:
            logger.error("Snapshot read failed for group %s: %s", group_id, exc)
            raise StoreUnavailableError(
                f"Could not load expense data for group {group_id}"
            ) from exc
        finally:
            await self._end_read(db)

        named_members = []
        for m in members:
            name, email = names.get(m.user_id, ("", ""))
            named_members.append(replace(m, name=name, email=email))

        snapshot = GroupSnapshot(
            group_id=group_id,
            members=tuple(named_members),
            expenses=tuple(expenses),
            splits=tuple(splits),
        )
        return group, snapshot, names

    def _build_report(self, snapshot: GroupSnapshot) -> GroupBalanceReport:
        report = build_group_balance_report(snapshot, self._epsilon)
        if self._strict and report.anomalies:
            raise MalformedSnapshotError(snapshot.group_id, report.anomalies)
        return report

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def compute_report(
        self, db: AsyncSession, group_id: str
    ) -> GroupBalanceReportResponse:
        _, snapshot, _ = await self.load_snapshot(db, group_id)
        return GroupBalanceReportResponse.from_domain(self._build_report(snapshot))

    async def get_group_summary(
        self, db: AsyncSession, group_id: str
    ) -> GroupSummaryResponse:
        group, snapshot, names = await self.load_snapshot(db, group_id)
        if group is None:
            raise GroupNotFoundError(group_id)
        report = self._build_report(snapshot)

        # Store returns expenses newest first
        recent = snapshot.expenses[: self._recent_limit]
        return GroupSummaryResponse(
            group=GroupInfo(
                id=group.id,
                name=group.name,
                description=group.description,
                created_by=group.created_by,
                created_at=group.created_at.isoformat() if group.created_at else None,
            ),
            members=[
                MemberItem(user_id=m.user_id, user_name=m.name, user_email=m.email)
                for m in snapshot.members
            ],
            recent_expenses=[
                ExpenseItem.from_domain(e, names.get(e.payer_id, ("Unknown", ""))[0] or "Unknown")
                for e in recent
            ],
            user_balances=[UserBalanceItem.from_domain(b) for b in report.user_balances],
            total_group_expenses_cents=report.total_group_expenses,
            total_group_expenses_display=cents_to_display(report.total_group_expenses),
            pending_settlements=sum(
                1 for b in report.user_balances if b.net_balance < -self._epsilon
            ),
        )

    async def get_user_dues(self, db: AsyncSession, user_id: str) -> UserDuesResponse:
        """The user's balance in every group where they still owe money.

        A group whose data cannot be loaded is skipped, not fatal.
        """
        try:
            group_ids = await self._repo.list_member_group_ids(db, user_id)
        except SQLAlchemyError as exc:
            logger.error("Group lookup failed for user %s: %s", user_id, exc)
            raise StoreUnavailableError(f"Could not list groups for user {user_id}") from exc
        finally:
            await self._end_read(db)

        items: list[UserDueItem] = []
        for group_id in group_ids:
            try:
                _, snapshot, _ = await self.load_snapshot(db, group_id)
                report = self._build_report(snapshot)
            except (StoreUnavailableError, MalformedSnapshotError) as exc:
                logger.warning("Skipping group %s in dues for %s: %s", group_id, user_id, exc.message)
                continue
            for b in report.user_balances:
                if b.user_id == user_id and b.total_owes > 0:
                    items.append(
                        UserDueItem(group_id=group_id, balance=UserBalanceItem.from_domain(b))
                    )
        return UserDuesResponse(user_id=user_id, items=items)

    async def build_balance_context(
        self, db: AsyncSession, group_id: str
    ) -> BalanceContextResponse:
        group, snapshot, _ = await self.load_snapshot(db, group_id)
        report = self._build_report(snapshot)
        return BalanceContextResponse(
            group_id=group_id,
            context=render_balance_context(report, group.name if group else None),
        )
