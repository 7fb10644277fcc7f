"""Domain constants for the margin rollup."""

from decimal import Decimal
from enum import IntEnum


class RowType(IntEnum):
    """Sentinel identifiers of the report rows.

    The rendering layer keys its templates off these values, they must
    never change.
    """

    EMPTY = -1
    GROUP = -2
    GROUPS_TOTAL = -3
    GLOBAL_MARGIN = -4
    NET_TOTAL = -5
    USER_MARGIN = -6
    OVERALL_TOTAL = -7


ZERO = Decimal("0")
ONE = Decimal("1")

# Smallest user margin rate accepted by the rollup; -1 would cancel the total.
MIN_USER_MARGIN_RATE = Decimal("-0.99")

DEFAULT_AMOUNT_PRECISION = 2
DEFAULT_RATE_PRECISION = 2
DEFAULT_MIN_MARGIN = Decimal("0.1")


def row_type_constants() -> dict[str, int]:
    """Return the row sentinels keyed by their renderer constant name."""
    return {f"ROW_{row_type.name}": int(row_type) for row_type in RowType}


__all__ = [
    "RowType",
    "ZERO",
    "ONE",
    "MIN_USER_MARGIN_RATE",
    "DEFAULT_AMOUNT_PRECISION",
    "DEFAULT_RATE_PRECISION",
    "DEFAULT_MIN_MARGIN",
    "row_type_constants",
]
