"""Composition root for wiring infrastructure adapters."""

from margin_rollup.application.ports.calculation_repository import (
    CalculationRepositoryPort,
)
from margin_rollup.application.ports.database import DatabaseEnginePort
from margin_rollup.application.ports.group_repository import (
    GroupRepositoryPort,
)
from margin_rollup.application.ports.margin_repository import (
    MarginTableRepositoryPort,
)
from margin_rollup.application.use_cases.run_rollup import RunRollupUseCase
from margin_rollup.application.use_cases.save_margin_table import (
    SaveMarginTableUseCase,
)
from margin_rollup.application.use_cases.update_calculation_totals import (
    UpdateCalculationTotalsUseCase,
)
from margin_rollup.infrastructure.calculation_repository import (
    SqlAlchemyCalculationRepository,
)
from margin_rollup.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from margin_rollup.infrastructure.group_repository import (
    SqlAlchemyGroupRepository,
)
from margin_rollup.infrastructure.logging.logger import get_app_logger
from margin_rollup.infrastructure.margin_repository import (
    SqlAlchemyMarginTableRepository,
)
from margin_rollup.infrastructure.settings import RollupSettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_margin_repository(
    db_port: DatabaseEnginePort | None = None,
) -> MarginTableRepositoryPort:
    """Return the margin table repository."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyMarginTableRepository(resolved_db)


def build_group_repository(
    db_port: DatabaseEnginePort | None = None,
) -> GroupRepositoryPort:
    """Return the group reference repository."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyGroupRepository(resolved_db)


def build_calculation_repository(
    db_port: DatabaseEnginePort | None = None,
) -> CalculationRepositoryPort:
    """Return the calculation repository."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyCalculationRepository(resolved_db)


def build_rollup_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> RunRollupUseCase:
    """Return the rollup use case wired with settings from the environment."""
    resolved_db = db_port or build_database_adapter()
    settings = RollupSettings.from_env()
    return RunRollupUseCase(
        margin_repository=build_margin_repository(resolved_db),
        group_repository=build_group_repository(resolved_db),
        logger=get_app_logger(),
        policy=settings.to_policy(),
    )


def build_update_totals_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> UpdateCalculationTotalsUseCase:
    """Return the use case refreshing cached calculation totals."""
    resolved_db = db_port or build_database_adapter()
    settings = RollupSettings.from_env()
    return UpdateCalculationTotalsUseCase(
        calculation_repository=build_calculation_repository(resolved_db),
        rollup=build_rollup_use_case(resolved_db),
        logger=get_app_logger(),
        precision=settings.amount_precision,
    )


def build_save_margin_table_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> SaveMarginTableUseCase:
    """Return the use case committing edited margin tables."""
    resolved_db = db_port or build_database_adapter()
    return SaveMarginTableUseCase(
        margin_repository=build_margin_repository(resolved_db),
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_margin_repository",
    "build_group_repository",
    "build_calculation_repository",
    "build_rollup_use_case",
    "build_update_totals_use_case",
    "build_save_margin_table_use_case",
]
