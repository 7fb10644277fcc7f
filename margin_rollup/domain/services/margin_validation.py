"""Continuity checks for margin range tables.

Tables are edited one bracket at a time; each edit is checked against the
bracket's neighbours in (minimum, maximum) order. Errors are returned as
values so the editing surface decides how to display them.
"""

from margin_rollup.domain.models.margins import (
    ContinuityError,
    ContinuityErrorKind,
    MarginBracket,
    MarginRangeTable,
    MarginTableError,
)


def sort_brackets(table: MarginRangeTable) -> MarginRangeTable:
    """Return a copy of the table sorted by minimum, then maximum."""
    ordered = sorted(
        table.brackets,
        key=lambda bracket: (bracket.minimum, bracket.maximum),
    )
    return MarginRangeTable(owner=table.owner, brackets=tuple(ordered))


def _neighbours(
    table: MarginRangeTable,
    index: int,
) -> tuple[MarginBracket | None, MarginBracket, MarginBracket | None]:
    ordered = sorted(
        range(len(table.brackets)),
        key=lambda i: (table.brackets[i].minimum, table.brackets[i].maximum),
    )
    position = ordered.index(index)
    previous = (
        table.brackets[ordered[position - 1]] if position > 0 else None
    )
    following = (
        table.brackets[ordered[position + 1]]
        if position < len(ordered) - 1
        else None
    )
    return previous, table.brackets[index], following


def _check_index(table: MarginRangeTable, index: int) -> None:
    if not 0 <= index < len(table.brackets):
        raise IndexError(
            f"Bracket index {index} out of range "
            f"for {len(table.brackets)} brackets"
        )


def validate_minimum(
    table: MarginRangeTable,
    index: int,
) -> ContinuityError | None:
    """Check the minimum of one bracket.

    Args:
        table: Table being edited.
        index: Index of the edited bracket in ``table.brackets``.

    Returns:
        ContinuityError | None: The violation, or None when valid.
    """
    _check_index(table, index)
    previous, bracket, _ = _neighbours(table, index)
    if bracket.minimum >= bracket.maximum:
        return ContinuityError(
            index,
            ContinuityErrorKind.MINIMUM_SMALLER_MAXIMUM,
        )
    if previous is None:
        return None
    if bracket.minimum < previous.maximum:
        return ContinuityError(index, ContinuityErrorKind.MINIMUM_OVERLAP)
    if bracket.minimum != previous.maximum:
        return ContinuityError(
            index,
            ContinuityErrorKind.MINIMUM_DISCONTINUED,
        )
    return None


def validate_maximum(
    table: MarginRangeTable,
    index: int,
) -> ContinuityError | None:
    """Check the maximum of one bracket.

    Args:
        table: Table being edited.
        index: Index of the edited bracket in ``table.brackets``.

    Returns:
        ContinuityError | None: The violation, or None when valid.
    """
    _check_index(table, index)
    _, bracket, following = _neighbours(table, index)
    if bracket.maximum <= bracket.minimum:
        return ContinuityError(
            index,
            ContinuityErrorKind.MAXIMUM_GREATER_MINIMUM,
        )
    if following is None:
        return None
    if bracket.maximum > following.minimum:
        return ContinuityError(index, ContinuityErrorKind.MAXIMUM_OVERLAP)
    if bracket.maximum != following.minimum:
        return ContinuityError(
            index,
            ContinuityErrorKind.MAXIMUM_DISCONTINUED,
        )
    return None


def validate_bracket(
    table: MarginRangeTable,
    edited_index: int,
) -> ContinuityError | None:
    """Run the minimum then the maximum check on an edited bracket."""
    return validate_minimum(table, edited_index) or validate_maximum(
        table,
        edited_index,
    )


def validate_table(table: MarginRangeTable) -> list[ContinuityError]:
    """Return the violations of every bracket, in table order."""
    errors = []
    for index in range(len(table.brackets)):
        error = validate_bracket(table, index)
        if error is not None:
            errors.append(error)
    return errors


def ensure_valid_table(table: MarginRangeTable) -> MarginRangeTable:
    """Return the table sorted, or raise when any bracket is invalid.

    Raises:
        MarginTableError: If at least one bracket violates continuity.
    """
    ordered = sort_brackets(table)
    errors = validate_table(ordered)
    if errors:
        raise MarginTableError(errors)
    return ordered


__all__ = [
    "sort_brackets",
    "validate_minimum",
    "validate_maximum",
    "validate_bracket",
    "validate_table",
    "ensure_valid_table",
]
