"""Domain services package."""

from .aggregation import ItemAggregation, aggregate_items, sum_by_category
from .margin_lookup import resolve_rate
from .margin_validation import (
    ensure_valid_table,
    sort_brackets,
    validate_bracket,
    validate_maximum,
    validate_minimum,
    validate_table,
)
from .rollup import (
    RollupPolicy,
    adjust_user_margin,
    clamp_user_margin_rate,
    compute_group,
    compute_rollup,
    empty_rollup,
)

__all__ = [
    "ItemAggregation",
    "aggregate_items",
    "sum_by_category",
    "resolve_rate",
    "ensure_valid_table",
    "sort_brackets",
    "validate_bracket",
    "validate_maximum",
    "validate_minimum",
    "validate_table",
    "RollupPolicy",
    "adjust_user_margin",
    "clamp_user_margin_rate",
    "compute_group",
    "compute_rollup",
    "empty_rollup",
]
