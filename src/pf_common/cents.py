"""Integer money helpers.

All amounts and totals are int cents. No float, no Decimal in the domain;
display strings are produced only at the schema layer.
"""


def cents_to_display(cents: int) -> str:
    """Convert cents to a plain decimal string: 1000 -> '10.00', -1250 -> '-12.50'."""
    if cents < 0:
        return "-" + cents_to_display(-cents)
    return f"{cents // 100}.{cents % 100:02d}"


def validate_amount(cents: int) -> None:
    """Expense amounts are strictly positive."""
    if cents <= 0:
        raise ValueError(f"Amount must be greater than zero, got {cents}")
