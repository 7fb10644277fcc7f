"""Use case running the margin rollup for a calculation or a simulation."""

from decimal import Decimal

from margin_rollup.application.ports.group_repository import (
    GroupRepositoryPort,
)
from margin_rollup.application.ports.margin_repository import (
    MarginTableRepositoryPort,
)
from margin_rollup.domain.constants import ZERO
from margin_rollup.domain.models import (
    AdjustmentQuery,
    Calculation,
    MarginRangeTable,
    RollupResult,
)
from margin_rollup.domain.services.aggregation import aggregate_items
from margin_rollup.domain.services.rollup import (
    RollupPolicy,
    clamp_user_margin_rate,
    compute_rollup,
    empty_rollup,
)
from margin_rollup.infrastructure.logging.logger import get_app_logger


RollupSource = Calculation | AdjustmentQuery


class RunRollupUseCase:
    """Turn a calculation or an adjustment query into report rows.

    Both sources go through the same computation so the row shape is
    identical: a stored calculation is aggregated from its items, a
    simulation uses the group amounts submitted by the client. Nothing is
    persisted.
    """

    def __init__(
        self,
        margin_repository: MarginTableRepositoryPort,
        group_repository: GroupRepositoryPort,
        logger=None,
        policy: RollupPolicy | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            margin_repository: Port providing group and global tables.
            group_repository: Port providing groups and category owners.
            logger: Optional logger compatible with logging.Logger-like API.
            policy: Optional numeric policy (minimum margin, precisions).
        """
        self._margin_repository = margin_repository
        self._group_repository = group_repository
        self._logger = logger or get_app_logger()
        self._policy = policy or RollupPolicy()

    def execute(self, source: RollupSource) -> RollupResult:
        """Return the rollup of the source.

        Args:
            source: Stored calculation (display and persist paths) or
                adjustment query (simulate path).

        Returns:
            RollupResult: Ordered rows and totals.

        Raises:
            TypeError: If the source is neither supported type.
        """
        if isinstance(source, Calculation):
            group_amounts, descriptions = self._amounts_from_calculation(
                source
            )
            user_margin_rate = source.user_margin_rate
            adjust = False
        elif isinstance(source, AdjustmentQuery):
            group_amounts, descriptions = self._amounts_from_query(source)
            user_margin_rate = source.user_margin_rate
            adjust = source.adjust
        else:
            raise TypeError(
                f"Unsupported rollup source: {type(source).__name__}"
            )

        if not group_amounts:
            self._logger.info("Rollup has no group; returning the empty row")
            return empty_rollup(self._policy)

        result = compute_rollup(
            group_amounts,
            self._load_group_tables(group_amounts),
            self._margin_repository.find_global_margin_table(),
            user_margin_rate,
            descriptions=descriptions,
            adjust=adjust,
            policy=self._policy,
        )
        self._report(result, user_margin_rate, adjust)
        return result

    def _amounts_from_calculation(
        self,
        calculation: Calculation,
    ) -> tuple[dict[int, Decimal], dict[int, str]]:
        category_ids = sorted({item.category_id for item in calculation.items})
        category_groups = {
            category_id: self._group_repository.find_category_owner_group(
                category_id
            )
            for category_id in category_ids
        }
        aggregation = aggregate_items(calculation.items, category_groups)
        for category_id in aggregation.orphan_categories:
            self._logger.warning(
                f"Category {category_id} has no group; its items are ignored"
            )
        descriptions: dict[int, str] = {}
        for group_id in aggregation.group_amounts:
            group = self._group_repository.find_group(group_id)
            descriptions[group_id] = group.code if group else str(group_id)
        return aggregation.group_amounts, descriptions

    def _amounts_from_query(
        self,
        query: AdjustmentQuery,
    ) -> tuple[dict[int, Decimal], dict[int, str]]:
        amounts: dict[int, Decimal] = {}
        descriptions: dict[int, str] = {}
        for query_group in query.groups:
            if query_group.total == 0:
                continue
            if query_group.id not in descriptions:
                group = self._group_repository.find_group(query_group.id)
                if group is None:
                    self._logger.warning(
                        f"Ignoring unknown group {query_group.id} in query"
                    )
                    continue
                descriptions[query_group.id] = group.code
            amounts[query_group.id] = (
                amounts.get(query_group.id, ZERO) + query_group.total
            )
        ordered = {group_id: amounts[group_id] for group_id in sorted(amounts)}
        return ordered, descriptions

    def _load_group_tables(
        self,
        group_amounts: dict[int, Decimal],
    ) -> dict[int, MarginRangeTable]:
        return {
            group_id: self._margin_repository.find_group_margin_table(
                group_id
            )
            for group_id in group_amounts
        }

    def _report(
        self,
        result: RollupResult,
        requested_user_margin: Decimal,
        adjust: bool,
    ) -> None:
        for group_id in result.unresolved_groups:
            self._logger.warning(
                f"No margin bracket for group {group_id}; rate set to 0"
            )
        if result.global_unresolved:
            self._logger.warning(
                f"No global margin bracket for {result.items_total}; "
                "rate set to 0"
            )
        if requested_user_margin <= -1:
            self._logger.warning(
                f"User margin {requested_user_margin} clamped to "
                f"{clamp_user_margin_rate(requested_user_margin)}"
            )
        if adjust and result.user_margin_rate != requested_user_margin:
            self._logger.info(
                f"User margin adjusted to {result.user_margin_rate} "
                f"to reach the minimum margin {result.min_margin}"
            )
        self._logger.info(
            f"Rollup computed: groups={len(result.group_rows)}, "
            f"items_total={result.items_total}, "
            f"overall_total={result.overall_total}"
        )


__all__ = ["RunRollupUseCase", "RollupSource"]
