"""Domain models for margin range tables."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from margin_rollup.utils.decimal_utils import coerce_decimal


class OwnerKind(str, Enum):
    """Kind of entity owning a margin range table."""

    CATEGORY = "category"
    GROUP = "group"
    GLOBAL = "global"


@dataclass(frozen=True)
class MarginOwner:
    """Owner of a margin range table.

    Attributes:
        kind: Category, group or the global singleton.
        owner_id: Identifier of the category or group; None for global.
    """

    kind: OwnerKind
    owner_id: int | None = None

    @classmethod
    def category(cls, category_id: int) -> "MarginOwner":
        return cls(OwnerKind.CATEGORY, category_id)

    @classmethod
    def group(cls, group_id: int) -> "MarginOwner":
        return cls(OwnerKind.GROUP, group_id)

    @classmethod
    def global_owner(cls) -> "MarginOwner":
        return cls(OwnerKind.GLOBAL, None)


@dataclass(frozen=True)
class MarginBracket:
    """A ``[minimum, maximum) -> rate`` entry of a margin range table.

    The rate is fractional and may be negative (discount). Instances may be
    transiently invalid while a table is edited; use ``create`` to reject
    an empty range up front.
    """

    minimum: Decimal
    maximum: Decimal
    rate: Decimal

    @classmethod
    def create(cls, minimum, maximum, rate) -> "MarginBracket":
        """Build a bracket from raw numerics, requiring minimum < maximum.

        Raises:
            ValueError: If the range is empty or inverted.
        """
        bracket = cls(
            minimum=coerce_decimal(minimum),
            maximum=coerce_decimal(maximum),
            rate=coerce_decimal(rate),
        )
        if bracket.minimum >= bracket.maximum:
            raise ValueError(
                f"Invalid bracket range: minimum ({bracket.minimum}) "
                f"must be < maximum ({bracket.maximum})"
            )
        return bracket

    def contains(self, amount: Decimal, inclusive_maximum: bool = False) -> bool:
        """Return whether the amount falls inside this bracket."""
        if amount < self.minimum:
            return False
        if inclusive_maximum:
            return amount <= self.maximum
        return amount < self.maximum


@dataclass(frozen=True)
class MarginRangeTable:
    """Ordered brackets owned by a category, a group or the global table."""

    owner: MarginOwner
    brackets: tuple[MarginBracket, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.brackets)

    @property
    def is_empty(self) -> bool:
        return not self.brackets


class ContinuityErrorKind(str, Enum):
    """Violations reported by the margin table validator."""

    MINIMUM_SMALLER_MAXIMUM = "minimum_smaller_maximum"
    MINIMUM_OVERLAP = "minimum_overlap"
    MINIMUM_DISCONTINUED = "minimum_discontinued"
    MAXIMUM_GREATER_MINIMUM = "maximum_greater_minimum"
    MAXIMUM_OVERLAP = "maximum_overlap"
    MAXIMUM_DISCONTINUED = "maximum_discontinued"


@dataclass(frozen=True)
class ContinuityError:
    """Continuity violation of one bracket.

    Attributes:
        at: Index of the offending bracket in the table as given.
        kind: Violation classification.
    """

    at: int
    kind: ContinuityErrorKind

    @property
    def field_name(self) -> str:
        """Return the bracket field the error belongs to."""
        return self.kind.value.split("_", 1)[0]


class MarginTableError(ValueError):
    """Raised when a margin table with continuity errors is committed."""

    def __init__(self, errors: list[ContinuityError]) -> None:
        self.errors = list(errors)
        details = ", ".join(
            f"bracket {error.at}: {error.kind.value}" for error in self.errors
        )
        super().__init__(f"Margin table is not continuous ({details})")


__all__ = [
    "OwnerKind",
    "MarginOwner",
    "MarginBracket",
    "MarginRangeTable",
    "ContinuityErrorKind",
    "ContinuityError",
    "MarginTableError",
]
