"""Settings helpers for the rollup engine."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import os

from margin_rollup.domain.constants import (
    DEFAULT_AMOUNT_PRECISION,
    DEFAULT_MIN_MARGIN,
    DEFAULT_RATE_PRECISION,
)
from margin_rollup.domain.services.rollup import RollupPolicy
from margin_rollup.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class RollupSettings:
    """Settings of the rollup computation.

    Attributes:
        min_margin: Minimum overall margin (fractional) for adjust mode.
        amount_precision: Decimal places of computed amounts.
        rate_precision: Decimal places of floored or ceiled margins.
    """

    min_margin: Decimal = DEFAULT_MIN_MARGIN
    amount_precision: int = DEFAULT_AMOUNT_PRECISION
    rate_precision: int = DEFAULT_RATE_PRECISION

    @classmethod
    def from_env(cls) -> "RollupSettings":
        """Build settings from environment variables.

        Returns:
            RollupSettings: Settings sourced from environment variables.
        """
        logger = get_app_logger()
        return cls(
            min_margin=cls._read_decimal(
                "ROLLUP_MIN_MARGIN",
                DEFAULT_MIN_MARGIN,
                logger=logger,
            ),
            amount_precision=cls._read_precision(
                "ROLLUP_AMOUNT_PRECISION",
                DEFAULT_AMOUNT_PRECISION,
                logger=logger,
            ),
            rate_precision=cls._read_precision(
                "ROLLUP_RATE_PRECISION",
                DEFAULT_RATE_PRECISION,
                logger=logger,
            ),
        )

    def to_policy(self) -> RollupPolicy:
        """Return the domain policy matching these settings."""
        return RollupPolicy(
            min_margin=self.min_margin,
            amount_precision=self.amount_precision,
            rate_precision=self.rate_precision,
        )

    @staticmethod
    def _read_decimal(name: str, default: Decimal, logger) -> Decimal:
        """Read a Decimal variable, falling back to the default.

        Args:
            name: Environment variable name.
            default: Value used when unset or invalid.
            logger: Logger used for warnings.

        Returns:
            Decimal: Parsed value.
        """
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = Decimal(raw.strip())
        except InvalidOperation:
            logger.warning(f"Invalid {name}={raw!r}; using {default}")
            return default
        if not value.is_finite():
            logger.warning(f"Non-finite {name}={raw!r}; using {default}")
            return default
        return value

    @staticmethod
    def _read_precision(name: str, default: int, logger) -> int:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw.strip())
        except ValueError:
            logger.warning(f"Invalid {name}={raw!r}; using {default}")
            return default
        if value < 0:
            logger.warning(f"Negative {name}={value}; using {default}")
            return default
        return value


__all__ = ["RollupSettings"]
