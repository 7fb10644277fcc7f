"""Application ports package."""

from .calculation_repository import CalculationRepositoryPort
from .database import DatabaseEnginePort
from .group_repository import GroupRepositoryPort
from .margin_repository import MarginTableRepositoryPort

__all__ = [
    "CalculationRepositoryPort",
    "DatabaseEnginePort",
    "GroupRepositoryPort",
    "MarginTableRepositoryPort",
]
