from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Coerce a stored amount to Decimal. Missing or malformed amounts count as zero."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO


def format_money(amount) -> str:
    if amount is None or isinstance(amount, bool):
        return "$0.00"
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return "$0.00"
    if not value.is_finite():
        return "$0.00"
    quantized = value.quantize(CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    return f"{sign}${abs(quantized):,.2f}"
