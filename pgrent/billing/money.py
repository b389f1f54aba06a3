"""Fixed-point money helpers.

Every amount the engine touches is a ``Decimal`` quantized to cents.
Floats coming from JSON payloads are converted through ``str()`` so that
``0.1`` becomes ``Decimal("0.10")`` rather than its binary approximation.
"""
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation

from ..errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# Largest value a Numeric(10, 2) column holds
MAX_AMOUNT = Decimal("99999999.99")


def to_money(value, field="amount"):
    """Parse ``value`` into a cent-quantized Decimal."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"{field} is too large")


def split_amount(total, parts):
    """Share of ``total`` for each of ``parts`` payers, truncated to cents.

    The remainder is not redistributed: 1000 over 3 gives 333.33 each.
    """
    if parts < 1:
        raise ValidationError("cannot split an amount across zero payers")
    return (to_money(total) / Decimal(parts)).quantize(CENT, rounding=ROUND_DOWN)


def sum_money(values):
    total = ZERO
    for value in values:
        total += to_money(value)
    return total


def format_money(value):
    if value is None:
        return None
    return str(to_money(value))
