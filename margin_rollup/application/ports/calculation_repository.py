"""Port for reading calculations and persisting their totals."""

from typing import Protocol

from margin_rollup.domain.models.calculation import Calculation
from margin_rollup.domain.models.rows import RollupResult


class CalculationRepositoryPort(Protocol):
    """Port exposing stored calculations."""

    def fetch_calculation(self, calculation_id: int) -> Calculation | None:
        """Return the calculation with its items, or None."""

    def fetch_calculation_ids(self) -> list[int]:
        """Return the ids of every stored calculation."""

    def save_totals(self, calculation_id: int, result: RollupResult) -> None:
        """Write the rollup scalars back onto the calculation."""


__all__ = ["CalculationRepositoryPort"]
