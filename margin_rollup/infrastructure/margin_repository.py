"""SQLAlchemy-backed repository for margin range tables."""

from sqlalchemy import text

from margin_rollup.application.ports.database import DatabaseEnginePort
from margin_rollup.application.ports.margin_repository import (
    MarginTableRepositoryPort,
)
from margin_rollup.domain.models.margins import (
    MarginBracket,
    MarginOwner,
    MarginRangeTable,
    OwnerKind,
)
from margin_rollup.utils.decimal_utils import coerce_decimal


def _owner_clause(owner: MarginOwner) -> str:
    # The global table has no owner row, its brackets carry a NULL owner_id.
    if owner.kind is OwnerKind.GLOBAL:
        return "owner_kind = :owner_kind AND owner_id IS NULL"
    return "owner_kind = :owner_kind AND owner_id = :owner_id"


def _owner_params(owner: MarginOwner) -> dict:
    return {"owner_kind": owner.kind.value, "owner_id": owner.owner_id}


class SqlAlchemyMarginTableRepository(MarginTableRepositoryPort):
    """Repository reading brackets from the ``margin_brackets`` table."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the calculation engine.
        """
        self._db_port = db_port

    def find_group_margin_table(self, group_id: int) -> MarginRangeTable:
        """Return the margin table of a group sorted by minimum."""
        return self._fetch_table(MarginOwner.group(group_id))

    def find_global_margin_table(self) -> MarginRangeTable:
        """Return the global margin table sorted by minimum."""
        return self._fetch_table(MarginOwner.global_owner())

    def replace_margin_table(self, table: MarginRangeTable) -> int:
        """Replace the stored brackets of the table's owner.

        The delete and the inserts run in a single transaction.

        Args:
            table: Table whose brackets replace the stored ones.

        Returns:
            int: Number of brackets written.
        """
        delete_query = text(
            f"DELETE FROM margin_brackets WHERE {_owner_clause(table.owner)}"
        )
        insert_query = text(
            """
            INSERT INTO margin_brackets (
                owner_kind, owner_id, minimum, maximum, rate
            )
            VALUES (:owner_kind, :owner_id, :minimum, :maximum, :rate)
            """
        )
        params = _owner_params(table.owner)
        engine = self._db_port.get_calculation_engine()
        with engine.begin() as conn:
            conn.execute(delete_query, params)
            if table.brackets:
                conn.execute(
                    insert_query,
                    [
                        {
                            **params,
                            "minimum": bracket.minimum,
                            "maximum": bracket.maximum,
                            "rate": bracket.rate,
                        }
                        for bracket in table.brackets
                    ],
                )
        return len(table.brackets)

    def _fetch_table(self, owner: MarginOwner) -> MarginRangeTable:
        query = text(
            f"""
            SELECT minimum, maximum, rate
            FROM margin_brackets
            WHERE {_owner_clause(owner)}
            ORDER BY minimum, maximum
            """
        )
        engine = self._db_port.get_calculation_engine()
        with engine.connect() as conn:
            rows = conn.execute(query, _owner_params(owner)).all()
        brackets = tuple(
            MarginBracket(
                minimum=coerce_decimal(row.minimum),
                maximum=coerce_decimal(row.maximum),
                rate=coerce_decimal(row.rate),
            )
            for row in rows
        )
        return MarginRangeTable(owner=owner, brackets=brackets)


__all__ = ["SqlAlchemyMarginTableRepository"]
