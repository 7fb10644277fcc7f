"""CLI adapter refreshing the cached totals of every calculation."""

from margin_rollup.infrastructure.container import build_update_totals_use_case
from margin_rollup.infrastructure.logging.logger import get_app_logger


def main() -> None:
    """Run the totals update over all stored calculations."""
    logger = get_app_logger()
    try:
        use_case = build_update_totals_use_case()
        result = use_case.execute_all()
    except RuntimeError as exc:
        logger.error(str(exc))
        return

    print(
        "Totals update completed: "
        f"calculations={result.total}, "
        f"updated={result.updated}, "
        f"unchanged={result.skipped}"
    )


if __name__ == "__main__":  # pragma: no cover
    main()
