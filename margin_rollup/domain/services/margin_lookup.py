"""Rate lookup in margin range tables."""

from decimal import Decimal

from margin_rollup.domain.models.margins import MarginRangeTable


def resolve_rate(table: MarginRangeTable, amount: Decimal) -> Decimal | None:
    """Return the rate of the bracket covering the amount.

    Brackets are expected sorted by minimum; no sorting happens here. A
    bracket matches when ``minimum <= amount < maximum``; the last bracket
    also admits ``amount == maximum``.

    Args:
        table: Margin range table to search.
        amount: Amount used as lookup key.

    Returns:
        Decimal | None: Matching rate, or None when no bracket covers the
        amount.
    """
    last_index = len(table.brackets) - 1
    for index, bracket in enumerate(table.brackets):
        if bracket.contains(amount, inclusive_maximum=index == last_index):
            return bracket.rate
    return None


__all__ = ["resolve_rate"]
