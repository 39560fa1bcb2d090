"""Plain-text rendering of a balance report for the chat assistant's prompt.

The assistant only reads this text; it never calls the engine itself.
"""

from src.gl_balance.domain.models import GroupBalanceReport
from src.gl_common.cents import cents_to_display


def _signed(cents: int) -> str:
    return f"+{cents_to_display(cents)}" if cents > 0 else cents_to_display(cents)


def render_balance_context(report: GroupBalanceReport, group_name: str | None = None) -> str:
    """Render totals, net balances and suggested transfers, one fact per line.

    Example:
        Group: Trip to Lisbon
        Total group expenses: $450.00
        Pending (unpaid splits): $350.00

        Net balances:
          Alice: +$200.00 (owed $200.00, still owes $0.00)
        ...
    """
    lines: list[str] = []
    if group_name:
        lines.append(f"Group: {group_name}")
    lines.append(f"Total group expenses: {cents_to_display(report.total_group_expenses)}")
    lines.append(f"Pending (unpaid splits): {cents_to_display(report.pending_amount)}")

    lines.append("\nNet balances:")
    if not report.user_balances:
        lines.append("  (no members)")
    for b in report.user_balances:
        lines.append(
            f"  {b.user_name or b.user_id}: {_signed(b.net_balance)} "
            f"(owed {cents_to_display(b.total_owed)}, "
            f"still owes {cents_to_display(b.total_owes)})"
        )

    lines.append("\nSuggested transfers:")
    if report.all_settled:
        lines.append("  All settled up.")
    for s in report.settlement_suggestions:
        lines.append(f"  {s.from_user_name} -> {s.to_user_name}: {cents_to_display(s.amount)}")

    return "\n".join(lines)
