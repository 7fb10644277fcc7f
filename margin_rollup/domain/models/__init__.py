"""Domain models package."""

from .calculation import (
    AdjustmentQuery,
    Calculation,
    CategoryAggregate,
    GroupAggregate,
    GroupInfo,
    Item,
    QueryGroup,
)
from .margins import (
    ContinuityError,
    ContinuityErrorKind,
    MarginBracket,
    MarginOwner,
    MarginRangeTable,
    MarginTableError,
    OwnerKind,
)
from .rows import (
    EmptyRow,
    GlobalMarginRow,
    GroupRow,
    GroupsTotalRow,
    NetTotalRow,
    OverallTotalRow,
    RollupResult,
    Row,
    UserMarginRow,
)

__all__ = [
    "AdjustmentQuery",
    "Calculation",
    "CategoryAggregate",
    "GroupAggregate",
    "GroupInfo",
    "Item",
    "QueryGroup",
    "ContinuityError",
    "ContinuityErrorKind",
    "MarginBracket",
    "MarginOwner",
    "MarginRangeTable",
    "MarginTableError",
    "OwnerKind",
    "EmptyRow",
    "GlobalMarginRow",
    "GroupRow",
    "GroupsTotalRow",
    "NetTotalRow",
    "OverallTotalRow",
    "RollupResult",
    "Row",
    "UserMarginRow",
]
