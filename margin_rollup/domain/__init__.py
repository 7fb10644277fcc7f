"""Domain package for the margin rollup rules and models."""

from .constants import RowType, row_type_constants
from .models import (
    AdjustmentQuery,
    Calculation,
    ContinuityError,
    ContinuityErrorKind,
    GroupAggregate,
    Item,
    MarginBracket,
    MarginOwner,
    MarginRangeTable,
    MarginTableError,
    QueryGroup,
    RollupResult,
    Row,
)
from .services import (
    RollupPolicy,
    aggregate_items,
    compute_rollup,
    resolve_rate,
    validate_bracket,
    validate_table,
)

__all__ = [
    "RowType",
    "row_type_constants",
    "AdjustmentQuery",
    "Calculation",
    "ContinuityError",
    "ContinuityErrorKind",
    "GroupAggregate",
    "Item",
    "MarginBracket",
    "MarginOwner",
    "MarginRangeTable",
    "MarginTableError",
    "QueryGroup",
    "RollupResult",
    "Row",
    "RollupPolicy",
    "aggregate_items",
    "compute_rollup",
    "resolve_rate",
    "validate_bracket",
    "validate_table",
]
