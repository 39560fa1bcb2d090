"""Unit tests for GroupBalanceService using an in-memory store and mock session."""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock

import pytest
from balance_fakes import InMemoryExpenseStore
from sqlalchemy.exc import OperationalError

from src.gl_balance.application.schemas import GroupBalanceReportResponse
from src.gl_balance.application.service import GroupBalanceService
from src.gl_balance.domain.models import Expense, Group, Member, Split
from src.gl_common.errors import (
    GroupNotFoundError,
    MalformedSnapshotError,
    StoreUnavailableError,
)


def _store(**overrides) -> InMemoryExpenseStore:  # type: ignore[no-untyped-def]
    defaults = dict(
        groups={"g-1": Group("g-1", "Lisbon trip", None, "A", datetime(2026, 9, 1, tzinfo=UTC))},
        members={"g-1": [Member("A"), Member("B"), Member("C")]},
        expenses={"g-1": [
            Expense("e2", "B", 15000, "Dinner", "food", date(2026, 9, 3)),
            Expense("e1", "A", 30000, "Hotel", "travel", date(2026, 9, 2)),
        ]},
        splits=[
            Split("e1", "A", 10000, is_paid=True),
            Split("e1", "B", 10000),
            Split("e1", "C", 10000),
            Split("e2", "B", 7500, is_paid=True),
            Split("e2", "C", 7500),
        ],
        users={"A": ("Alice", "alice@x.io"), "B": ("Bob", "bob@x.io"), "C": ("Cara", "cara@x.io")},
        memberships={"C": ["g-1"]},
    )
    defaults.update(overrides)
    return InMemoryExpenseStore(**defaults)


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


class TestComputeReport:
    async def test_returns_report_response(self, db) -> None:  # type: ignore[no-untyped-def]
        svc = GroupBalanceService(repo=_store(), epsilon=0, strict=False)

        resp = await svc.compute_report(db, "g-1")

        assert isinstance(resp, GroupBalanceReportResponse)
        assert [b.net_balance_cents for b in resp.user_balances] == [20000, -2500, -17500]
        assert [b.user_name for b in resp.user_balances] == ["Alice", "Bob", "Cara"]
        assert [(s.from_user_id, s.to_user_id, s.amount_cents) for s in resp.settlement_suggestions] == [
            ("B", "A", 2500),
            ("C", "A", 17500),
        ]
        assert resp.total_group_expenses_cents == 45000
        assert resp.total_group_expenses_display == "$450.00"
        assert resp.pending_amount_cents == 27500
        assert resp.all_settled is False

    async def test_snapshot_read_is_rolled_back(self, db) -> None:  # type: ignore[no-untyped-def]
        store = _store()
        svc = GroupBalanceService(repo=store, epsilon=0, strict=False)

        await svc.compute_report(db, "g-1")

        assert store.snapshots_opened == 1
        db.rollback.assert_awaited_once()

    async def test_unknown_group_yields_empty_report(self, db) -> None:  # type: ignore[no-untyped-def]
        svc = GroupBalanceService(repo=_store(), epsilon=0, strict=False)

        resp = await svc.compute_report(db, "g-nope")

        assert resp.user_balances == []
        assert resp.settlement_suggestions == []
        assert resp.all_settled is True

    async def test_missing_user_names(self, db) -> None:  # type: ignore[no-untyped-def]
        svc = GroupBalanceService(repo=_store(users={}), epsilon=0, strict=False)

        resp = await svc.compute_report(db, "g-1")

        assert [b.user_name for b in resp.user_balances] == ["", "", ""]
        assert resp.settlement_suggestions[0].from_user_name == "Unknown"

    async def test_store_failure_raises_store_unavailable(self, db) -> None:  # type: ignore[no-untyped-def]
        svc = GroupBalanceService(repo=_store(failing={"g-1"}), epsilon=0, strict=False)

        with pytest.raises(StoreUnavailableError):
            await svc.compute_report(db, "g-1")
        db.rollback.assert_awaited_once()

    async def test_failed_rollback_raises_store_unavailable(self, db) -> None:  # type: ignore[no-untyped-def]
        db.rollback.side_effect = OperationalError("ROLLBACK", {}, Exception("connection reset"))
        svc = GroupBalanceService(repo=_store(), epsilon=0, strict=False)

        with pytest.raises(StoreUnavailableError):
            await svc.compute_report(db, "g-1")

    async def test_strict_mode_rejects_anomalies(self, db) -> None:  # type: ignore[no-untyped-def]
        store = _store(splits=[Split("e1", "B", 10000)])
        svc = GroupBalanceService(repo=store, epsilon=0, strict=True)

        with pytest.raises(MalformedSnapshotError) as exc_info:
            await svc.compute_report(db, "g-1")
        assert len(exc_info.value.anomalies) == 2

    async def test_lenient_mode_reports_anomalies(self, db) -> None:  # type: ignore[no-untyped-def]
        store = _store(splits=[Split("e1", "B", 10000)])
        svc = GroupBalanceService(repo=store, epsilon=0, strict=False)

        resp = await svc.compute_report(db, "g-1")

        assert len(resp.anomalies) == 2
        assert [b.net_balance_cents for b in resp.user_balances] == [10000, -10000, 0]


class TestGroupSummary:
    async def test_summary(self, db) -> None:  # type: ignore[no-untyped-def]
        svc = GroupBalanceService(repo=_store(), epsilon=0, strict=False, recent_expenses_limit=1)

        resp = await svc.get_group_summary(db, "g-1")

        assert resp.group.name == "Lisbon trip"
        assert resp.group.created_at == "2026-09-01T00:00:00+00:00"
        assert [m.user_email for m in resp.members] == ["alice@x.io", "bob@x.io", "cara@x.io"]
        assert len(resp.recent_expenses) == 1
        assert resp.recent_expenses[0].id == "e2"
        assert resp.recent_expenses[0].paid_by_name == "Bob"
        assert resp.recent_expenses[0].expense_date == "2026-09-03"
        assert resp.total_group_expenses_cents == 45000
        assert resp.pending_settlements == 2

    async def test_unknown_group(self, db) -> None:  # type: ignore[no-untyped-def]
        svc = GroupBalanceService(repo=_store(), epsilon=0, strict=False)

        with pytest.raises(GroupNotFoundError):
            await svc.get_group_summary(db, "g-nope")

    async def test_payer_outside_directory(self, db) -> None:  # type: ignore[no-untyped-def]
        store = _store(users={"A": ("Alice", "alice@x.io")})
        svc = GroupBalanceService(repo=store, epsilon=0, strict=False)

        resp = await svc.get_group_summary(db, "g-1")

        assert resp.recent_expenses[0].paid_by_name == "Unknown"


class TestUserDues:
    async def test_lists_groups_where_user_owes(self, db) -> None:  # type: ignore[no-untyped-def]
        svc = GroupBalanceService(repo=_store(), epsilon=0, strict=False)

        resp = await svc.get_user_dues(db, "C")

        assert resp.user_id == "C"
        assert [i.group_id for i in resp.items] == ["g-1"]
        assert resp.items[0].balance.total_owes_cents == 17500

    async def test_user_without_unpaid_splits(self, db) -> None:  # type: ignore[no-untyped-def]
        store = _store(memberships={"A": ["g-1"]})
        svc = GroupBalanceService(repo=store, epsilon=0, strict=False)

        resp = await svc.get_user_dues(db, "A")

        assert resp.items == []

    async def test_failing_group_is_skipped(self, db) -> None:  # type: ignore[no-untyped-def]
        store = _store(
            memberships={"C": ["g-down", "g-1"]},
            members={"g-1": [Member("A"), Member("B"), Member("C")], "g-down": [Member("C")]},
            failing={"g-down"},
        )
        svc = GroupBalanceService(repo=store, epsilon=0, strict=False)

        resp = await svc.get_user_dues(db, "C")

        assert [i.group_id for i in resp.items] == ["g-1"]

    async def test_group_with_failed_rollback_is_skipped(self, db) -> None:  # type: ignore[no-untyped-def]
        store = _store(
            memberships={"C": ["g-2", "g-1"]},
            members={"g-1": [Member("A"), Member("B"), Member("C")], "g-2": [Member("C")]},
        )
        # group listing, g-2 snapshot, g-1 snapshot
        db.rollback.side_effect = [None, OperationalError("ROLLBACK", {}, Exception("reset")), None]
        svc = GroupBalanceService(repo=store, epsilon=0, strict=False)

        resp = await svc.get_user_dues(db, "C")

        assert [i.group_id for i in resp.items] == ["g-1"]

    async def test_group_lookup_failure(self, db) -> None:  # type: ignore[no-untyped-def]
        store = AsyncMock()
        store.list_member_group_ids.side_effect = OperationalError("SELECT", {}, Exception("down"))
        svc = GroupBalanceService(repo=store, epsilon=0, strict=False)

        with pytest.raises(StoreUnavailableError):
            await svc.get_user_dues(db, "C")


class TestBalanceContext:
    async def test_context_text(self, db) -> None:  # type: ignore[no-untyped-def]
        svc = GroupBalanceService(repo=_store(), epsilon=0, strict=False)

        resp = await svc.build_balance_context(db, "g-1")

        assert resp.group_id == "g-1"
        assert resp.context.startswith("Group: Lisbon trip")
        assert "Cara -> Alice: $175.00" in resp.context
