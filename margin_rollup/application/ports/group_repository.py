"""Port for reading group and category reference data."""

from typing import Protocol

from margin_rollup.domain.models.calculation import GroupInfo


class GroupRepositoryPort(Protocol):
    """Port exposing groups and the category to group relation."""

    def find_group(self, group_id: int) -> GroupInfo | None:
        """Return the group, or None when it does not exist."""

    def find_category_owner_group(self, category_id: int) -> int | None:
        """Return the id of the group owning a category."""

    def fetch_groups(self) -> list[GroupInfo]:
        """Return every group ordered by id."""


__all__ = ["GroupRepositoryPort"]
