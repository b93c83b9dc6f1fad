"""Helpers for Decimal normalization."""

from decimal import Decimal, ROUND_HALF_UP

PAISE = Decimal("0.01")


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from callers, YAML config or price feeds.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_paise(value) -> Decimal:
    """Round a rupee amount to two decimals (half-up)."""
    return coerce_decimal(value).quantize(PAISE, rounding=ROUND_HALF_UP)


__all__ = ["PAISE", "coerce_decimal", "to_paise"]
