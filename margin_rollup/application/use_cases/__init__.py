"""Application use cases package."""

from .run_rollup import RollupSource, RunRollupUseCase
from .save_margin_table import SaveMarginTableUseCase
from .update_calculation_totals import (
    UpdateCalculationTotalsUseCase,
    UpdateTotalsResult,
)

__all__ = [
    "RollupSource",
    "RunRollupUseCase",
    "SaveMarginTableUseCase",
    "UpdateCalculationTotalsUseCase",
    "UpdateTotalsResult",
]
