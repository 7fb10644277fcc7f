"""SQLAlchemy-backed repository for groups and categories."""

from sqlalchemy import text

from margin_rollup.application.ports.database import DatabaseEnginePort
from margin_rollup.application.ports.group_repository import (
    GroupRepositoryPort,
)
from margin_rollup.domain.models.calculation import GroupInfo


class SqlAlchemyGroupRepository(GroupRepositoryPort):
    """Repository backed by SQLAlchemy for group reference data."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the calculation engine.
        """
        self._db_port = db_port

    def find_group(self, group_id: int) -> GroupInfo | None:
        """Return the group, or None when it does not exist."""
        query = text("SELECT id, code FROM margin_groups WHERE id = :group_id")
        engine = self._db_port.get_calculation_engine()
        with engine.connect() as conn:
            row = conn.execute(query, {"group_id": group_id}).first()
        if row is None:
            return None
        return GroupInfo(id=int(row.id), code=row.code)

    def find_category_owner_group(self, category_id: int) -> int | None:
        """Return the id of the group owning a category."""
        query = text(
            """
            SELECT group_id
            FROM margin_categories
            WHERE id = :category_id
            """
        )
        engine = self._db_port.get_calculation_engine()
        with engine.connect() as conn:
            row = conn.execute(query, {"category_id": category_id}).first()
        if row is None or row.group_id is None:
            return None
        return int(row.group_id)

    def fetch_groups(self) -> list[GroupInfo]:
        """Return every group ordered by id."""
        query = text("SELECT id, code FROM margin_groups ORDER BY id")
        engine = self._db_port.get_calculation_engine()
        with engine.connect() as conn:
            rows = conn.execute(query).all()
        return [GroupInfo(id=int(row.id), code=row.code) for row in rows]


__all__ = ["SqlAlchemyGroupRepository"]
