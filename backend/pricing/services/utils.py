from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_CEILING, ROUND_FLOOR, getcontext
from typing import Optional

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def d(val) -> Decimal:
    """Coerce incoming values to Decimal safely."""
    if isinstance(val, Decimal):
        return val
    if val is None:
        return ZERO
    return Decimal(str(val))


def safe_decimal(val) -> Optional[Decimal]:
    """Decimal for numeric-looking input, None for anything else (bools included)."""
    if val is None or isinstance(val, bool):
        return None
    try:
        return d(val)
    except (InvalidOperation, ValueError, TypeError):
        return None


def amount_or_zero(val) -> Decimal:
    """Finite non-negative Decimal for the input, ZERO for anything unusable."""
    num = safe_decimal(val)
    if num is None or not num.is_finite() or num < ZERO:
        return ZERO
    return num


def floor_int(amount: Decimal) -> int:
    return int(amount.to_integral_value(rounding=ROUND_FLOOR))


def ceil_div(numerator: int, denominator: Decimal) -> int:
    """Smallest integer n with n * denominator >= numerator."""
    return int((d(numerator) / denominator).to_integral_value(rounding=ROUND_CEILING))


def per_person(total: Decimal, travelers: int) -> Decimal:
    if travelers and travelers > 0:
        return total / travelers
    return ZERO


def quantize_money(amount: Decimal) -> Decimal:
    """Round to cents, widening the context precision for very large amounts."""
    context = getcontext().copy()
    context.prec = max(context.prec, amount.adjusted() + 3)
    return amount.quantize(TWOPLACES, context=context)


def fmt(amount) -> str:
    """Compact display of an amount for explanation strings (400.00 -> 400)."""
    text = format(d(amount), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
