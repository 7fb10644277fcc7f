"""Port for reading and replacing margin range tables."""

from typing import Protocol

from margin_rollup.domain.models.margins import MarginRangeTable


class MarginTableRepositoryPort(Protocol):
    """Port exposing margin range tables sorted by minimum."""

    def find_group_margin_table(self, group_id: int) -> MarginRangeTable:
        """Return the margin table of a group (possibly empty)."""

    def find_global_margin_table(self) -> MarginRangeTable:
        """Return the global margin table (possibly empty)."""

    def replace_margin_table(self, table: MarginRangeTable) -> int:
        """Replace the stored brackets of the table's owner."""


__all__ = ["MarginTableRepositoryPort"]
