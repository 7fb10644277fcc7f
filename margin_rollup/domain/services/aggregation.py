"""Aggregation of calculation items into category and group amounts."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from margin_rollup.domain.constants import ZERO
from margin_rollup.domain.models import CategoryAggregate, Item


@dataclass(frozen=True)
class ItemAggregation:
    """Result of folding items into categories then groups.

    Attributes:
        categories: Category amounts ordered by category id.
        group_amounts: Group amounts keyed by group id, ascending.
        orphan_categories: Categories without an owning group; their items
            are left out of every group.
    """

    categories: tuple[CategoryAggregate, ...]
    group_amounts: dict[int, Decimal]
    orphan_categories: tuple[int, ...] = field(default_factory=tuple)


def sum_by_category(
    items: Iterable[Item],
    categories: Iterable[int] = (),
) -> dict[int, Decimal]:
    """Sum item totals per category.

    Args:
        items: Line items to fold.
        categories: Categories referenced without items; they get a zero
            entry.

    Returns:
        dict[int, Decimal]: Amount per category id.
    """
    totals: dict[int, Decimal] = {category: ZERO for category in categories}
    for item in items:
        totals[item.category_id] = (
            totals.get(item.category_id, ZERO) + item.total
        )
    return totals


def aggregate_items(
    items: Iterable[Item],
    category_groups: Mapping[int, int | None],
    categories: Iterable[int] = (),
) -> ItemAggregation:
    """Fold items into per-category then per-group amounts.

    Groups owning no category never appear in ``group_amounts``.

    Args:
        items: Line items of the calculation.
        category_groups: Owning group id of every referenced category.
        categories: Categories referenced without items.

    Returns:
        ItemAggregation: Category aggregates and group amounts.
    """
    category_totals = sum_by_category(items, categories)
    aggregates: list[CategoryAggregate] = []
    orphans: list[int] = []
    group_totals: dict[int, Decimal] = {}
    for category_id in sorted(category_totals):
        group_id = category_groups.get(category_id)
        if group_id is None:
            orphans.append(category_id)
            continue
        amount = category_totals[category_id]
        aggregates.append(
            CategoryAggregate(
                category_id=category_id,
                group_id=group_id,
                amount=amount,
            )
        )
        group_totals[group_id] = group_totals.get(group_id, ZERO) + amount

    return ItemAggregation(
        categories=tuple(aggregates),
        group_amounts={
            group_id: group_totals[group_id]
            for group_id in sorted(group_totals)
        },
        orphan_categories=tuple(orphans),
    )


__all__ = ["ItemAggregation", "sum_by_category", "aggregate_items"]
