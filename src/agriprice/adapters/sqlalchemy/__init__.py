"""SQLAlchemy adapter package for agriprice."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyCropRepository,
    SqlAlchemyMarketRepository,
    SqlAlchemyPriceEntryRepository,
    SqlAlchemyRegionRepository,
    SqlAlchemySyncRunRepository,
)
from .unit_of_work import (
    SqlAlchemyIngestUnitOfWork,
    create_database_engine,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCropRepository",
    "SqlAlchemyIngestUnitOfWork",
    "SqlAlchemyMarketRepository",
    "SqlAlchemyPriceEntryRepository",
    "SqlAlchemyRegionRepository",
    "SqlAlchemySyncRunRepository",
    "create_database_engine",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
