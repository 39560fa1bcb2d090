"""Pydantic response schemas for the gl_balance API.

Every monetary field is exposed twice: `<name>_cents` (int) and
`<name>_display` (formatted string).
"""

from pydantic import BaseModel

from src.gl_balance.domain.models import (
    Expense,
    GroupBalanceReport,
    NetBalance,
    PairwiseBalance,
    SettlementSuggestion,
)
from src.gl_common.cents import cents_to_display

# ---------------------------------------------------------------------------
# Report items
# ---------------------------------------------------------------------------


class UserBalanceItem(BaseModel):
    user_id: str
    user_name: str
    user_email: str
    net_balance_cents: int
    net_balance_display: str
    total_owed_cents: int
    total_owed_display: str
    total_owes_cents: int
    total_owes_display: str

    @classmethod
    def from_domain(cls, b: NetBalance) -> "UserBalanceItem":
        return cls(
            user_id=b.user_id,
            user_name=b.user_name,
            user_email=b.user_email,
            net_balance_cents=b.net_balance,
            net_balance_display=cents_to_display(b.net_balance),
            total_owed_cents=b.total_owed,
            total_owed_display=cents_to_display(b.total_owed),
            total_owes_cents=b.total_owes,
            total_owes_display=cents_to_display(b.total_owes),
        )


class DetailedBalanceItem(BaseModel):
    creditor_id: str
    creditor_name: str
    debtor_id: str
    debtor_name: str
    amount_cents: int
    amount_display: str

    @classmethod
    def from_domain(cls, p: PairwiseBalance) -> "DetailedBalanceItem":
        return cls(
            creditor_id=p.creditor_id,
            creditor_name=p.creditor_name,
            debtor_id=p.debtor_id,
            debtor_name=p.debtor_name,
            amount_cents=p.amount,
            amount_display=cents_to_display(p.amount),
        )


class SettlementSuggestionItem(BaseModel):
    from_user_id: str
    from_user_name: str
    to_user_id: str
    to_user_name: str
    amount_cents: int
    amount_display: str

    @classmethod
    def from_domain(cls, s: SettlementSuggestion) -> "SettlementSuggestionItem":
        return cls(
            from_user_id=s.from_user_id,
            from_user_name=s.from_user_name,
            to_user_id=s.to_user_id,
            to_user_name=s.to_user_name,
            amount_cents=s.amount,
            amount_display=cents_to_display(s.amount),
        )


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class GroupBalanceReportResponse(BaseModel):
    group_id: str
    user_balances: list[UserBalanceItem]
    detailed_balances: list[DetailedBalanceItem]
    settlement_suggestions: list[SettlementSuggestionItem]
    total_group_expenses_cents: int
    total_group_expenses_display: str
    pending_amount_cents: int
    pending_amount_display: str
    all_settled: bool
    anomalies: list[str]

    @classmethod
    def from_domain(cls, report: GroupBalanceReport) -> "GroupBalanceReportResponse":
        return cls(
            group_id=report.group_id,
            user_balances=[UserBalanceItem.from_domain(b) for b in report.user_balances],
            detailed_balances=[
                DetailedBalanceItem.from_domain(p) for p in report.detailed_balances
            ],
            settlement_suggestions=[
                SettlementSuggestionItem.from_domain(s)
                for s in report.settlement_suggestions
            ],
            total_group_expenses_cents=report.total_group_expenses,
            total_group_expenses_display=cents_to_display(report.total_group_expenses),
            pending_amount_cents=report.pending_amount,
            pending_amount_display=cents_to_display(report.pending_amount),
            all_settled=report.all_settled,
            anomalies=list(report.anomalies),
        )


class MemberItem(BaseModel):
    user_id: str
    user_name: str
    user_email: str


class ExpenseItem(BaseModel):
    id: str
    description: str | None
    category: str | None
    expense_date: str | None  # ISO date
    paid_by: str
    paid_by_name: str
    total_amount_cents: int
    total_amount_display: str

    @classmethod
    def from_domain(cls, e: Expense, paid_by_name: str) -> "ExpenseItem":
        return cls(
            id=e.id,
            description=e.description,
            category=e.category,
            expense_date=e.expense_date.isoformat() if e.expense_date else None,
            paid_by=e.payer_id,
            paid_by_name=paid_by_name,
            total_amount_cents=e.total_amount,
            total_amount_display=cents_to_display(e.total_amount),
        )


class GroupInfo(BaseModel):
    id: str
    name: str
    description: str | None
    created_by: str
    created_at: str | None  # ISO8601


class GroupSummaryResponse(BaseModel):
    group: GroupInfo
    members: list[MemberItem]
    recent_expenses: list[ExpenseItem]
    user_balances: list[UserBalanceItem]
    total_group_expenses_cents: int
    total_group_expenses_display: str
    pending_settlements: int


class UserDueItem(BaseModel):
    group_id: str
    balance: UserBalanceItem


class UserDuesResponse(BaseModel):
    user_id: str
    items: list[UserDueItem]


class BalanceContextResponse(BaseModel):
    group_id: str
    context: str
