"""Helpers for Decimal normalization and rounding."""

from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL, payloads or adapters.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _quantum(places: int) -> Decimal:
    return Decimal(1).scaleb(-places)


def round_amount(value: Decimal, places: int = 2) -> Decimal:
    """Round a monetary value half-up to the given number of places."""
    return value.quantize(_quantum(places), rounding=ROUND_HALF_UP)


def floor_decimal(value: Decimal, places: int = 2) -> Decimal:
    """Round a value toward negative infinity at the given precision."""
    return value.quantize(_quantum(places), rounding=ROUND_FLOOR)


def ceil_decimal(value: Decimal, places: int = 2) -> Decimal:
    """Round a value toward positive infinity at the given precision."""
    return value.quantize(_quantum(places), rounding=ROUND_CEILING)


def safe_divide(dividend: Decimal, divisor: Decimal) -> Decimal:
    """Divide two values, returning zero when the divisor is zero."""
    if divisor == 0:
        return Decimal("0")
    return dividend / divisor


__all__ = [
    "coerce_decimal",
    "round_amount",
    "floor_decimal",
    "ceil_decimal",
    "safe_divide",
]
