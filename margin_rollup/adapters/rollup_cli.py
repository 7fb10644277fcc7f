"""CLI adapter printing the rollup report of a stored calculation.

The calculation is selected with the ``CALCULATION_ID`` environment
variable. Nothing is written back to the database.
"""

import os

from margin_rollup.domain.constants import RowType
from margin_rollup.domain.models import RollupResult, Row
from margin_rollup.infrastructure.container import (
    build_calculation_repository,
    build_database_adapter,
    build_rollup_use_case,
)
from margin_rollup.infrastructure.logging.logger import get_app_logger


_ROW_FORMATTERS = {
    RowType.EMPTY: lambda row: "(no group)",
    RowType.GROUP: lambda row: (
        f"{row.description or row.group_id}: amount={row.amount} "
        f"rate={row.rate} margin={row.margin_amount} total={row.total}"
    ),
    RowType.GROUPS_TOTAL: lambda row: f"Groups total: {row.total}",
    RowType.GLOBAL_MARGIN: lambda row: (
        f"Global margin: rate={row.rate} amount={row.amount}"
    ),
    RowType.NET_TOTAL: lambda row: f"Net total: {row.total}",
    RowType.USER_MARGIN: lambda row: (
        f"User margin: rate={row.rate} amount={row.amount}"
    ),
    RowType.OVERALL_TOTAL: lambda row: f"Overall total: {row.total}",
}


def format_row(row: Row) -> str:
    """Return the printable line of a report row."""
    return _ROW_FORMATTERS[row.row_type](row)


def _parse_calculation_id(value: str | None, logger) -> int | None:
    """Parse the calculation identifier.

    Args:
        value: Raw identifier read from the environment.
        logger: Logger used for warnings.

    Returns:
        int | None: Parsed identifier or None when missing or invalid.
    """
    if not value:
        logger.warning("CALCULATION_ID is required to print a rollup.")
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid CALCULATION_ID '{value}'. Expected integer.")
        return None


def print_report(result: RollupResult) -> None:
    """Print the rows and the margin check of a rollup."""
    for row in result.rows:
        print(format_row(row))
    if result.overall_below:
        print(
            f"Overall margin {result.overall_margin} is below the minimum "
            f"{result.min_margin}"
        )


def main() -> None:
    """Print the rollup report of the calculation in CALCULATION_ID."""
    logger = get_app_logger()
    calculation_id = _parse_calculation_id(os.getenv("CALCULATION_ID"), logger)
    if calculation_id is None:
        return

    try:
        db_adapter = build_database_adapter()
        repository = build_calculation_repository(db_adapter)
        calculation = repository.fetch_calculation(calculation_id)
        if calculation is None:
            logger.error(f"Calculation {calculation_id} not found")
            return
        result = build_rollup_use_case(db_adapter).execute(calculation)
    except RuntimeError as exc:
        logger.error(str(exc))
        return

    print(f"Calculation {calculation_id}")
    print_report(result)


if __name__ == "__main__":  # pragma: no cover
    main()
