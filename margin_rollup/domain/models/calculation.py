"""Domain models for calculations and simulate queries."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from margin_rollup.utils.decimal_utils import coerce_decimal


@dataclass(frozen=True)
class Item:
    """Priced line item of a calculation."""

    price: Decimal
    quantity: Decimal
    category_id: int

    @property
    def total(self) -> Decimal:
        """Return price multiplied by quantity."""
        return self.price * self.quantity


@dataclass(frozen=True)
class CategoryAggregate:
    """Sum of item totals for one category."""

    category_id: int
    group_id: int
    amount: Decimal


@dataclass(frozen=True)
class GroupAggregate:
    """Amount, resolved rate and totals of one group.

    Attributes:
        group_id: Identifier of the group.
        amount: Sum of the group's category amounts.
        rate: Fractional margin rate resolved from the group's table.
        margin_amount: Amount multiplied by the rate.
        total: Amount plus margin amount.
        description: Display label of the group.
    """

    group_id: int
    amount: Decimal
    rate: Decimal
    margin_amount: Decimal
    total: Decimal
    description: str = ""


@dataclass(frozen=True)
class GroupInfo:
    """Reference data for a group."""

    id: int
    code: str


@dataclass(frozen=True)
class Calculation:
    """Persisted calculation with its items and cached totals.

    Only ``overall_total`` is trusted by consumers; the other scalars are
    caches refreshed by the persist path.
    """

    id: int | None
    items: tuple[Item, ...] = field(default_factory=tuple)
    user_margin_rate: Decimal = Decimal("0")
    groups: tuple[GroupAggregate, ...] = field(default_factory=tuple)
    items_total: Decimal = Decimal("0")
    global_margin_rate: Decimal = Decimal("0")
    global_margin_amount: Decimal = Decimal("0")
    user_margin_amount: Decimal = Decimal("0")
    net_total: Decimal = Decimal("0")
    overall_total: Decimal = Decimal("0")
    calculation_date: date | None = None
    state_code: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass(frozen=True)
class QueryGroup:
    """Group total submitted by a simulate request."""

    id: int
    total: Decimal


@dataclass(frozen=True)
class AdjustmentQuery:
    """Simulate request carrying pre-aggregated group amounts.

    Attributes:
        adjust: When true, the user margin is raised so the overall margin
            reaches the configured minimum.
        user_margin_rate: Fractional user margin applied to the net total.
        groups: Group amounts, in submission order.
    """

    adjust: bool = False
    user_margin_rate: Decimal = Decimal("0")
    groups: tuple[QueryGroup, ...] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, payload: Mapping) -> "AdjustmentQuery":
        """Build a query from a decoded request payload.

        Accepts ``userMargin`` or ``user_margin_rate`` for the user margin
        and a ``groups`` list of ``{"id": ..., "total": ...}`` mappings.
        """
        raw_margin = payload.get("user_margin_rate", payload.get("userMargin"))
        groups = tuple(
            QueryGroup(
                id=int(group["id"]),
                total=coerce_decimal(group.get("total")),
            )
            for group in payload.get("groups") or ()
        )
        return cls(
            adjust=bool(payload.get("adjust", False)),
            user_margin_rate=coerce_decimal(raw_margin),
            groups=groups,
        )


__all__ = [
    "Item",
    "CategoryAggregate",
    "GroupAggregate",
    "GroupInfo",
    "Calculation",
    "QueryGroup",
    "AdjustmentQuery",
]
