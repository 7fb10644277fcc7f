"""Rollup of group amounts into the report rows and final totals."""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

from margin_rollup.domain.constants import (
    DEFAULT_AMOUNT_PRECISION,
    DEFAULT_MIN_MARGIN,
    DEFAULT_RATE_PRECISION,
    MIN_USER_MARGIN_RATE,
    ONE,
    ZERO,
)
from margin_rollup.domain.models import (
    EmptyRow,
    GlobalMarginRow,
    GroupAggregate,
    GroupRow,
    GroupsTotalRow,
    MarginRangeTable,
    NetTotalRow,
    OverallTotalRow,
    RollupResult,
    UserMarginRow,
)
from margin_rollup.domain.services.margin_lookup import resolve_rate
from margin_rollup.utils.decimal_utils import (
    ceil_decimal,
    floor_decimal,
    round_amount,
    safe_divide,
)


@dataclass(frozen=True)
class RollupPolicy:
    """Numeric policy of a rollup.

    Attributes:
        min_margin: Minimum overall margin, fractional.
        amount_precision: Decimal places of products of amounts by rates.
        rate_precision: Decimal places of floored or ceiled margins.
    """

    min_margin: Decimal = DEFAULT_MIN_MARGIN
    amount_precision: int = DEFAULT_AMOUNT_PRECISION
    rate_precision: int = DEFAULT_RATE_PRECISION


def clamp_user_margin_rate(rate: Decimal) -> Decimal:
    """Return the rate, raised to the smallest accepted value if <= -1."""
    if rate <= -ONE:
        return MIN_USER_MARGIN_RATE
    return rate


def empty_rollup(policy: RollupPolicy | None = None) -> RollupResult:
    """Return the rollup of a calculation without any group."""
    policy = policy or RollupPolicy()
    return RollupResult(rows=(EmptyRow(),), min_margin=policy.min_margin)


def compute_group(
    group_id: int,
    amount: Decimal,
    table: MarginRangeTable | None,
    *,
    description: str = "",
    precision: int = DEFAULT_AMOUNT_PRECISION,
) -> tuple[GroupAggregate, bool]:
    """Resolve the group's rate from its own amount and derive its totals.

    Returns:
        tuple[GroupAggregate, bool]: The group, and whether its rate was
        resolved (False means the rate defaulted to zero).
    """
    rate = resolve_rate(table, amount) if table is not None else None
    resolved = rate is not None
    if rate is None:
        rate = ZERO
    margin_amount = round_amount(amount * rate, precision)
    return (
        GroupAggregate(
            group_id=group_id,
            amount=amount,
            rate=rate,
            margin_amount=margin_amount,
            total=amount + margin_amount,
            description=description,
        ),
        resolved,
    )


def adjust_user_margin(
    groups_amount: Decimal,
    net_total: Decimal,
    min_margin: Decimal,
    precision: int = DEFAULT_RATE_PRECISION,
) -> Decimal:
    """Return the user margin lifting the overall margin to the minimum.

    The rate is ceiled so the adjusted overall margin is never under the
    minimum.
    """
    target = groups_amount * (ONE + min_margin)
    rate = safe_divide(target - net_total, net_total)
    return clamp_user_margin_rate(ceil_decimal(rate, precision))


def _overall_margin(
    overall_total: Decimal,
    groups_amount: Decimal,
    precision: int,
) -> Decimal:
    ratio = safe_divide(overall_total - groups_amount, groups_amount)
    return floor_decimal(ratio, precision)


def compute_rollup(
    group_amounts: Mapping[int, Decimal],
    group_tables: Mapping[int, MarginRangeTable],
    global_table: MarginRangeTable | None,
    user_margin_rate: Decimal,
    *,
    descriptions: Mapping[int, str] | None = None,
    adjust: bool = False,
    policy: RollupPolicy | None = None,
) -> RollupResult:
    """Compute the report rows and totals from group amounts.

    Groups are emitted in the iteration order of ``group_amounts``. Each
    group's rate is looked up with its own amount; the global rate with
    the sum of the group totals. A missing bracket yields a zero rate.

    Args:
        group_amounts: Pre-margin amount of every group.
        group_tables: Margin table of every group.
        global_table: Global margin table.
        user_margin_rate: User margin applied to the net total.
        descriptions: Optional display label of every group.
        adjust: Raise the user margin when the overall margin is under the
            policy minimum.
        policy: Numeric policy; defaults apply when omitted.

    Returns:
        RollupResult: Either the single empty row or the group rows
        followed by the five summary rows.
    """
    policy = policy or RollupPolicy()
    if not group_amounts:
        return empty_rollup(policy)

    descriptions = descriptions or {}
    places = policy.amount_precision
    groups: list[GroupAggregate] = []
    unresolved: list[int] = []
    for group_id, amount in group_amounts.items():
        group, resolved = compute_group(
            group_id,
            amount,
            group_tables.get(group_id),
            description=descriptions.get(group_id, ""),
            precision=places,
        )
        if not resolved:
            unresolved.append(group_id)
        groups.append(group)

    groups_amount = sum((group.amount for group in groups), ZERO)
    items_total = sum((group.total for group in groups), ZERO)

    global_unresolved = False
    global_rate = ZERO
    if items_total != 0 and global_table is not None:
        found = resolve_rate(global_table, items_total)
        if found is None:
            global_unresolved = True
        else:
            global_rate = found
    elif items_total != 0:
        global_unresolved = True
    global_amount = round_amount(items_total * global_rate, places)
    net_total = items_total + global_amount

    user_rate = clamp_user_margin_rate(user_margin_rate)
    user_amount = round_amount(net_total * user_rate, places)
    overall_total = net_total + user_amount
    overall_margin = _overall_margin(
        overall_total,
        groups_amount,
        policy.rate_precision,
    )
    overall_below = overall_total != 0 and overall_margin < policy.min_margin

    if adjust and overall_below:
        user_rate = adjust_user_margin(
            groups_amount,
            net_total,
            policy.min_margin,
            policy.rate_precision,
        )
        user_amount = round_amount(net_total * user_rate, places)
        overall_total = net_total + user_amount
        overall_margin = _overall_margin(
            overall_total,
            groups_amount,
            policy.rate_precision,
        )
        overall_below = False

    rows = [
        GroupRow(
            group_id=group.group_id,
            amount=group.amount,
            rate=group.rate,
            margin_amount=group.margin_amount,
            total=group.total,
            description=group.description,
        )
        for group in groups
    ]
    rows.extend(
        [
            GroupsTotalRow(total=items_total),
            GlobalMarginRow(rate=global_rate, amount=global_amount),
            NetTotalRow(total=net_total),
            UserMarginRow(rate=user_rate, amount=user_amount),
            OverallTotalRow(total=overall_total),
        ]
    )

    return RollupResult(
        rows=tuple(rows),
        items_total=items_total,
        global_margin_rate=global_rate,
        global_margin_amount=global_amount,
        user_margin_rate=user_rate,
        user_margin_amount=user_amount,
        net_total=net_total,
        overall_total=overall_total,
        groups_amount=groups_amount,
        overall_margin=overall_margin,
        min_margin=policy.min_margin,
        overall_below=overall_below,
        unresolved_groups=tuple(unresolved),
        global_unresolved=global_unresolved,
    )


__all__ = [
    "RollupPolicy",
    "clamp_user_margin_rate",
    "empty_rollup",
    "compute_group",
    "adjust_user_margin",
    "compute_rollup",
]
