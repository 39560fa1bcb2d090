"""Snapshot validation and the zero-sum balance check.

Both return a list of human-readable violation strings (empty = OK) and log
each one, so callers decide whether to tolerate or reject.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable

from src.gl_balance.domain.constants import BALANCE_EPSILON_CENTS
from src.gl_balance.domain.models import GroupSnapshot, NetBalance
from src.gl_common.cents import cents_to_display

logger = logging.getLogger(__name__)


def find_snapshot_anomalies(snapshot: GroupSnapshot) -> list[str]:
    """Check split sums against expense totals and member references."""
    anomalies: list[str] = []
    member_ids = {m.user_id for m in snapshot.members}
    expense_ids = {e.id for e in snapshot.expenses}

    split_sums: dict[str, int] = defaultdict(int)
    for split in snapshot.splits:
        if split.expense_id not in expense_ids:
            anomalies.append(
                f"split for user {split.user_id} references unknown expense {split.expense_id}"
            )
            continue
        split_sums[split.expense_id] += split.amount_owed
        if split.user_id not in member_ids:
            anomalies.append(
                f"expense {split.expense_id}: split user {split.user_id} is not an active member"
            )

    for expense in snapshot.expenses:
        if expense.payer_id not in member_ids:
            anomalies.append(
                f"expense {expense.id}: payer {expense.payer_id} is not an active member"
            )
        split_total = split_sums.get(expense.id, 0)
        if split_total != expense.total_amount:
            anomalies.append(
                f"expense {expense.id}: splits sum to {cents_to_display(split_total)} "
                f"but total is {cents_to_display(expense.total_amount)}"
            )

    for msg in anomalies:
        logger.warning("group=%s snapshot anomaly: %s", snapshot.group_id, msg)
    return anomalies


def verify_zero_sum(
    balances: Iterable[NetBalance],
    epsilon: int = BALANCE_EPSILON_CENTS,
) -> list[str]:
    """Net balances across a group must sum to zero within epsilon."""
    violations: list[str] = []
    total = sum(b.net_balance for b in balances)
    if abs(total) > epsilon:
        msg = f"zero-sum violated: net balances sum to {total} cents"
        violations.append(msg)
        logger.error(msg)
    return violations
