"""Domain models for gl_balance: pure dataclasses, no SQLAlchemy dependency.

Snapshot types (Member, Expense, Split, GroupSnapshot) are frozen: the engine
only reads them. Derived types are rebuilt on every computation.
"""

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class Member:
    user_id: str
    name: str = ""
    email: str = ""


@dataclass(frozen=True)
class Expense:
    id: str
    payer_id: str
    total_amount: int                # cents
    description: str | None = None
    category: str | None = None
    expense_date: date | None = None


@dataclass(frozen=True)
class Split:
    expense_id: str
    user_id: str
    amount_owed: int                 # cents
    is_paid: bool = False


@dataclass(frozen=True)
class GroupSnapshot:
    """One consistent read of a group's members, expenses and splits."""

    group_id: str
    members: tuple[Member, ...] = ()
    expenses: tuple[Expense, ...] = ()
    splits: tuple[Split, ...] = ()


@dataclass(frozen=True)
class Group:
    id: str
    name: str
    description: str | None
    created_by: str
    created_at: datetime | None = None


@dataclass
class NetBalance:
    user_id: str
    user_name: str = ""
    user_email: str = ""
    net_balance: int = 0             # cents, positive=owed money, negative=owes money
    total_owed: int = 0              # cents others owe this member
    total_owes: int = 0              # cents this member still owes (unpaid splits)


@dataclass
class SettlementSuggestion:
    from_user_id: str
    to_user_id: str
    amount: int                      # cents, always > 0
    from_user_name: str = "Unknown"
    to_user_name: str = "Unknown"


@dataclass
class PairwiseBalance:
    """Debtor/creditor pairing shown in the detailed view; not a settlement plan."""

    creditor_id: str
    debtor_id: str
    amount: int                      # cents
    creditor_name: str = "Unknown"
    debtor_name: str = "Unknown"


@dataclass
class GroupBalanceReport:
    group_id: str
    user_balances: list[NetBalance] = field(default_factory=list)
    detailed_balances: list[PairwiseBalance] = field(default_factory=list)
    settlement_suggestions: list[SettlementSuggestion] = field(default_factory=list)
    total_group_expenses: int = 0    # cents
    pending_amount: int = 0          # cents, unpaid splits
    anomalies: list[str] = field(default_factory=list)

    @property
    def all_settled(self) -> bool:
        return not self.settlement_suggestions
