"""Compose aggregator and planner output into one GroupBalanceReport."""

import logging

from src.gl_balance.domain.aggregator import aggregate
from src.gl_balance.domain.checks import find_snapshot_anomalies, verify_zero_sum
from src.gl_balance.domain.constants import BALANCE_EPSILON_CENTS
from src.gl_balance.domain.models import GroupBalanceReport, GroupSnapshot
from src.gl_balance.domain.planner import list_pairwise_balances, plan_settlements

logger = logging.getLogger(__name__)


def build_group_balance_report(
    snapshot: GroupSnapshot,
    epsilon: int = BALANCE_EPSILON_CENTS,
) -> GroupBalanceReport:
    anomalies = find_snapshot_anomalies(snapshot)

    user_balances = list(
        aggregate(snapshot.members, snapshot.expenses, snapshot.splits).values()
    )
    anomalies.extend(verify_zero_sum(user_balances, epsilon))

    report = GroupBalanceReport(
        group_id=snapshot.group_id,
        user_balances=user_balances,
        detailed_balances=list_pairwise_balances(user_balances, epsilon),
        settlement_suggestions=plan_settlements(user_balances, epsilon),
        total_group_expenses=sum(e.total_amount for e in snapshot.expenses),
        pending_amount=sum(s.amount_owed for s in snapshot.splits if not s.is_paid),
        anomalies=anomalies,
    )
    logger.debug(
        "Report: group=%s members=%d expenses=%d suggestions=%d",
        snapshot.group_id,
        len(user_balances),
        len(snapshot.expenses),
        len(report.settlement_suggestions),
    )
    return report
