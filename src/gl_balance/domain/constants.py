"""Balance engine constants."""

# Tolerance, in cents, for treating a balance or transfer as zero. Money is
# already rounded to whole cents by to_cents at the store boundary, so the
# engine compares exactly.
BALANCE_EPSILON_CENTS = 0
