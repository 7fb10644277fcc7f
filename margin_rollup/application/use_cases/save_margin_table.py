"""Use case committing an edited margin range table."""

from margin_rollup.application.ports.margin_repository import (
    MarginTableRepositoryPort,
)
from margin_rollup.domain.models import MarginRangeTable, MarginTableError
from margin_rollup.domain.services.margin_validation import ensure_valid_table
from margin_rollup.infrastructure.logging.logger import get_app_logger


class SaveMarginTableUseCase:
    """Validate and store the brackets of a margin table."""

    def __init__(
        self,
        margin_repository: MarginTableRepositoryPort,
        logger=None,
    ) -> None:
        """Initialize the use case with its required dependencies."""
        self._margin_repository = margin_repository
        self._logger = logger or get_app_logger()

    def execute(self, table: MarginRangeTable) -> int:
        """Replace the owner's stored table with the given brackets.

        Args:
            table: Edited table, in any order.

        Returns:
            int: Number of brackets written.

        Raises:
            MarginTableError: If a bracket breaks continuity; nothing is
                written.
        """
        try:
            ordered = ensure_valid_table(table)
        except MarginTableError as exc:
            self._logger.warning(
                f"Rejected margin table for {table.owner.kind.value} "
                f"{table.owner.owner_id}: {exc}"
            )
            raise
        count = self._margin_repository.replace_margin_table(ordered)
        self._logger.info(
            f"Saved {count} margin brackets for {table.owner.kind.value} "
            f"{table.owner.owner_id}"
        )
        return count


__all__ = ["SaveMarginTableUseCase"]
