"""Settlement planning: greedy two-cursor merge of creditors and debtors.

Creditors and debtors are walked in input order, not sorted. Every iteration
exhausts at least one side, so at most (members with a non-zero balance) - 1
transfers are emitted. Different input orders can pair people differently;
the count bound and the settled end state do not change.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from src.gl_balance.domain.constants import BALANCE_EPSILON_CENTS
from src.gl_balance.domain.models import NetBalance, PairwiseBalance, SettlementSuggestion


@dataclass
class _Remaining:
    user_id: str
    name: str
    amount: int  # cents, always tracked as a positive magnitude


def _display_name(name: str) -> str:
    return name or "Unknown"


def plan_settlements(
    balances: Iterable[NetBalance],
    epsilon: int = BALANCE_EPSILON_CENTS,
) -> list[SettlementSuggestion]:
    """Turn signed net balances into debtor → creditor transfers."""
    balances = list(balances)
    creditors = [
        _Remaining(b.user_id, b.user_name, b.net_balance)
        for b in balances
        if b.net_balance > 0
    ]
    debtors = [
        _Remaining(b.user_id, b.user_name, -b.net_balance)
        for b in balances
        if b.net_balance < 0
    ]

    suggestions: list[SettlementSuggestion] = []
    i = j = 0
    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]

        amount = min(creditor.amount, debtor.amount)
        if amount > epsilon:
            suggestions.append(
                SettlementSuggestion(
                    from_user_id=debtor.user_id,
                    to_user_id=creditor.user_id,
                    amount=amount,
                    from_user_name=_display_name(debtor.name),
                    to_user_name=_display_name(creditor.name),
                )
            )

        creditor.amount -= amount
        debtor.amount -= amount

        if creditor.amount <= epsilon:
            i += 1
        if debtor.amount <= epsilon:
            j += 1

    return suggestions


def list_pairwise_balances(
    balances: Iterable[NetBalance],
    epsilon: int = BALANCE_EPSILON_CENTS,
) -> list[PairwiseBalance]:
    """Pair every debtor with every creditor, capped at the smaller magnitude.

    This is the "who could pay whom" view. Amounts overlap across pairs and
    must not be summed into a settlement plan.
    """
    balances = list(balances)
    pairs: list[PairwiseBalance] = []
    for debtor in balances:
        if debtor.net_balance >= 0:
            continue
        for creditor in balances:
            if creditor.net_balance <= 0 or creditor.user_id == debtor.user_id:
                continue
            amount = min(-debtor.net_balance, creditor.net_balance)
            if amount > epsilon:
                pairs.append(
                    PairwiseBalance(
                        creditor_id=creditor.user_id,
                        debtor_id=debtor.user_id,
                        amount=amount,
                        creditor_name=_display_name(creditor.user_name),
                        debtor_name=_display_name(debtor.user_name),
                    )
                )
    return pairs
