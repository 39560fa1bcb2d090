"""Reduce a group's expenses and splits into one signed net balance per member."""

from collections import defaultdict
from collections.abc import Iterable

from src.gl_balance.domain.models import Expense, Member, NetBalance, Split


def aggregate(
    members: Iterable[Member],
    expenses: Iterable[Expense],
    splits: Iterable[Split],
) -> dict[str, NetBalance]:
    """Return {user_id: NetBalance}, one entry per member in member order.

    For every split whose debtor is not the payer, the debtor's net balance
    drops by amount_owed and the payer's rises by the same amount. The payer's
    own split is skipped. total_owed counts every such credit; total_owes
    only counts splits that are still unpaid.

    Splits whose debtor or payer is not a member are skipped on both sides,
    which keeps the emitted balances zero-sum. checks.find_snapshot_anomalies
    reports them.
    """
    balances: dict[str, NetBalance] = {
        m.user_id: NetBalance(user_id=m.user_id, user_name=m.name, user_email=m.email)
        for m in members
    }

    splits_by_expense: dict[str, list[Split]] = defaultdict(list)
    for split in splits:
        splits_by_expense[split.expense_id].append(split)

    for expense in expenses:
        creditor = balances.get(expense.payer_id)
        for split in splits_by_expense.get(expense.id, ()):
            if split.user_id == expense.payer_id:
                continue
            debtor = balances.get(split.user_id)
            if creditor is None or debtor is None:
                continue
            debtor.net_balance -= split.amount_owed
            creditor.net_balance += split.amount_owed
            creditor.total_owed += split.amount_owed
            if not split.is_paid:
                debtor.total_owes += split.amount_owed

    return balances
