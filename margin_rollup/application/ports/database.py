"""Database port for the margin rollup.

This module defines the application-layer protocol for accessing the
database engine. Infrastructure implementations are expected to provide
concrete adapters that satisfy this port.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the engine of the calculation database.

    Repositories can depend on this protocol instead of concrete database
    drivers or configuration details.
    """

    def get_calculation_engine(self) -> Engine:
        """Get the engine for the calculation database.

        Returns:
            Engine: SQLAlchemy engine connected to the calculation database.
        """


__all__ = ["DatabaseEnginePort"]
