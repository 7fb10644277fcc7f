"""Use case recomputing and persisting the totals of calculations."""

from dataclasses import dataclass

from margin_rollup.application.ports.calculation_repository import (
    CalculationRepositoryPort,
)
from margin_rollup.application.use_cases.run_rollup import RunRollupUseCase
from margin_rollup.domain.constants import DEFAULT_AMOUNT_PRECISION
from margin_rollup.domain.models import Calculation, RollupResult
from margin_rollup.infrastructure.logging.logger import get_app_logger
from margin_rollup.utils.decimal_utils import round_amount


@dataclass(frozen=True)
class UpdateTotalsResult:
    """Summary of a batch totals update.

    Attributes:
        total: Number of calculations processed.
        updated: Number of calculations whose totals were written.
        skipped: Number of calculations already up to date.
    """

    total: int
    updated: int
    skipped: int


class UpdateCalculationTotalsUseCase:
    """Refresh the cached totals of stored calculations.

    Totals are written only when the items total, the global margin rate
    or the overall total changed.
    """

    def __init__(
        self,
        calculation_repository: CalculationRepositoryPort,
        rollup: RunRollupUseCase,
        logger=None,
        precision: int = DEFAULT_AMOUNT_PRECISION,
    ) -> None:
        """Initialize the use case.

        Args:
            calculation_repository: Port reading and writing calculations.
            rollup: Use case computing the rollup of a calculation.
            logger: Optional logger compatible with logging.Logger-like API.
            precision: Decimal places used to compare cached totals.
        """
        self._calculation_repository = calculation_repository
        self._rollup = rollup
        self._logger = logger or get_app_logger()
        self._precision = precision

    def execute(self, calculation_id: int) -> bool:
        """Recompute one calculation and persist its totals if they changed.

        Args:
            calculation_id: Identifier of the calculation.

        Returns:
            bool: True when totals were written, False when unchanged.

        Raises:
            LookupError: If the calculation does not exist.
        """
        calculation = self._calculation_repository.fetch_calculation(
            calculation_id
        )
        if calculation is None:
            raise LookupError(f"Calculation {calculation_id} not found")

        result = self._rollup.execute(calculation)
        if not self._has_changed(calculation, result):
            self._logger.info(
                f"Calculation {calculation_id} totals are up to date"
            )
            return False

        self._calculation_repository.save_totals(calculation_id, result)
        self._logger.info(
            f"Calculation {calculation_id} totals updated: "
            f"overall_total={result.overall_total}"
        )
        return True

    def execute_all(self) -> UpdateTotalsResult:
        """Recompute every stored calculation.

        Returns:
            UpdateTotalsResult: Counts of processed and updated calculations.
        """
        calculation_ids = self._calculation_repository.fetch_calculation_ids()
        updated = sum(
            1 for calculation_id in calculation_ids
            if self.execute(calculation_id)
        )
        self._logger.info(
            f"Updated totals of {updated}/{len(calculation_ids)} calculations"
        )
        return UpdateTotalsResult(
            total=len(calculation_ids),
            updated=updated,
            skipped=len(calculation_ids) - updated,
        )

    def _has_changed(
        self,
        calculation: Calculation,
        result: RollupResult,
    ) -> bool:
        stored_groups = [
            (group.group_id, round_amount(group.total, self._precision))
            for group in calculation.groups
        ]
        computed_groups = [
            (row.group_id, round_amount(row.total, self._precision))
            for row in result.group_rows
        ]
        if stored_groups != computed_groups:
            return True
        pairs = (
            (calculation.items_total, result.items_total),
            (calculation.global_margin_rate, result.global_margin_rate),
            (calculation.user_margin_rate, result.user_margin_rate),
            (calculation.overall_total, result.overall_total),
        )
        return any(
            round_amount(old, self._precision)
            != round_amount(new, self._precision)
            for old, new in pairs
        )


__all__ = ["UpdateCalculationTotalsUseCase", "UpdateTotalsResult"]
