"""Integer arithmetic utilities for cents-based balances.

All amounts and balances inside the service use int (cents). Currency units
coming from the database (NUMERIC) are converted once, at the store boundary.
"""

from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")


def to_cents(amount: Decimal | int | str | float | None) -> int:
    """Convert currency units to cents with half-up rounding: Decimal('12.345') -> 1235.

    None is treated as 0 (nullable NUMERIC columns).
    """
    if amount is None:
        return 0
    units = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int(units.quantize(_CENT, rounding=ROUND_HALF_UP) * 100)


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"
