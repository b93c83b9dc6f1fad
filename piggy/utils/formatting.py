"""Display formatting for rupee amounts and returns."""

from decimal import Decimal, ROUND_HALF_UP, localcontext

from piggy.utils.decimal_utils import coerce_decimal

RUPEE = "₹"


def _group_indian(digits: str) -> str:
    """Group an unsigned digit string as 12,34,56,789 (last three, then pairs)."""
    if len(digits) <= 3:
        return digits

    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(amount) -> str:
    """
    Whole-rupee string with Indian digit grouping.

    >>> format_currency(123456)
    '₹1,23,456'
    """
    # to_integral_value never runs out of context precision, unlike quantize
    value = coerce_decimal(amount).to_integral_value(rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    digits = format(abs(value), "f")
    return f"{sign}{RUPEE}{_group_indian(digits)}"


def format_percentage(value) -> str:
    """Signed percentage with two decimals, e.g. +5.67% / -3.45%."""
    raw = coerce_decimal(value)
    with localcontext() as ctx:
        # Integer digits plus two decimals must fit the working precision
        ctx.prec = max(ctx.prec, raw.adjusted() + 3)
        pct = raw.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if pct == 0:
        pct = abs(pct)
    sign = "+" if pct >= 0 else ""
    return f"{sign}{pct:f}%"
