"""Report rows produced by the rollup and consumed by renderers."""

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import ClassVar, Union

from margin_rollup.domain.constants import ZERO, RowType


class _RowMixin:
    row_type: ClassVar[RowType]

    def to_dict(self) -> dict:
        """Return the row fields keyed for the renderer, with its sentinel."""
        return {"id": int(self.row_type), **asdict(self)}


@dataclass(frozen=True)
class EmptyRow(_RowMixin):
    """Single row emitted when the calculation has no group."""

    row_type: ClassVar[RowType] = RowType.EMPTY


@dataclass(frozen=True)
class GroupRow(_RowMixin):
    """Per-group amount, rate, margin amount and total."""

    row_type: ClassVar[RowType] = RowType.GROUP

    group_id: int
    amount: Decimal
    rate: Decimal
    margin_amount: Decimal
    total: Decimal
    description: str = ""


@dataclass(frozen=True)
class GroupsTotalRow(_RowMixin):
    """Sum of the group totals."""

    row_type: ClassVar[RowType] = RowType.GROUPS_TOTAL

    total: Decimal


@dataclass(frozen=True)
class GlobalMarginRow(_RowMixin):
    """Global margin rate and amount applied to the groups total."""

    row_type: ClassVar[RowType] = RowType.GLOBAL_MARGIN

    rate: Decimal
    amount: Decimal


@dataclass(frozen=True)
class NetTotalRow(_RowMixin):
    """Groups total plus global margin."""

    row_type: ClassVar[RowType] = RowType.NET_TOTAL

    total: Decimal


@dataclass(frozen=True)
class UserMarginRow(_RowMixin):
    """User margin rate and amount applied to the net total."""

    row_type: ClassVar[RowType] = RowType.USER_MARGIN

    rate: Decimal
    amount: Decimal


@dataclass(frozen=True)
class OverallTotalRow(_RowMixin):
    """Net total plus user margin."""

    row_type: ClassVar[RowType] = RowType.OVERALL_TOTAL

    total: Decimal


Row = Union[
    EmptyRow,
    GroupRow,
    GroupsTotalRow,
    GlobalMarginRow,
    NetTotalRow,
    UserMarginRow,
    OverallTotalRow,
]


@dataclass(frozen=True)
class RollupResult:
    """Ordered report rows plus the scalar totals of a rollup.

    Attributes:
        rows: Either a single EmptyRow, or the group rows followed by the
            five summary rows.
        items_total: Sum of the group totals.
        global_margin_rate: Rate resolved from the global table.
        global_margin_amount: Items total multiplied by the global rate.
        user_margin_rate: User margin actually applied (after clamping and
            adjustment).
        user_margin_amount: Net total multiplied by the user margin rate.
        net_total: Items total plus the global margin amount.
        overall_total: Net total plus the user margin amount.
        groups_amount: Sum of the groups' pre-margin amounts.
        overall_margin: Overall margin over the groups amount (floored).
        min_margin: Minimum overall margin used for ``overall_below``.
        overall_below: True when the overall margin is under the minimum.
        unresolved_groups: Groups whose table had no bracket for their
            amount (rate defaulted to zero).
        global_unresolved: True when the global table had no bracket for
            the items total.
    """

    rows: tuple[Row, ...]
    items_total: Decimal = ZERO
    global_margin_rate: Decimal = ZERO
    global_margin_amount: Decimal = ZERO
    user_margin_rate: Decimal = ZERO
    user_margin_amount: Decimal = ZERO
    net_total: Decimal = ZERO
    overall_total: Decimal = ZERO
    groups_amount: Decimal = ZERO
    overall_margin: Decimal = ZERO
    min_margin: Decimal = ZERO
    overall_below: bool = False
    unresolved_groups: tuple[int, ...] = field(default_factory=tuple)
    global_unresolved: bool = False

    @property
    def is_empty(self) -> bool:
        return len(self.rows) == 1 and isinstance(self.rows[0], EmptyRow)

    @property
    def group_rows(self) -> list[GroupRow]:
        return [row for row in self.rows if isinstance(row, GroupRow)]

    def to_dict(self) -> dict:
        """Return rows and scalars in the shape expected by renderers."""
        return {
            "rows": [row.to_dict() for row in self.rows],
            "items_total": self.items_total,
            "global_margin_rate": self.global_margin_rate,
            "global_margin_amount": self.global_margin_amount,
            "user_margin_rate": self.user_margin_rate,
            "user_margin_amount": self.user_margin_amount,
            "net_total": self.net_total,
            "overall_total": self.overall_total,
            "overall_margin": self.overall_margin,
            "overall_below": self.overall_below,
            "min_margin": self.min_margin,
        }


__all__ = [
    "EmptyRow",
    "GroupRow",
    "GroupsTotalRow",
    "GlobalMarginRow",
    "NetTotalRow",
    "UserMarginRow",
    "OverallTotalRow",
    "Row",
    "RollupResult",
]
