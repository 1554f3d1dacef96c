"""Domain ports (interfaces) for adapters to implement."""

from __future__ import annotations

from .feeds import FeedFetcher, FeedReader, FetchedFeed, RawRow, RowTranslator
from .persistence import (
    CropRepository,
    MarketRepository,
    PriceEntryRepository,
    RegionRepository,
    Repository,
    SyncRunRepository,
)
from .unit_of_work import IngestRepositories, IngestUnitOfWork, RepositoryCollection, UnitOfWork

__all__ = [
    "CropRepository",
    "FeedFetcher",
    "FeedReader",
    "FetchedFeed",
    "IngestRepositories",
    "IngestUnitOfWork",
    "MarketRepository",
    "PriceEntryRepository",
    "RawRow",
    "RegionRepository",
    "Repository",
    "RepositoryCollection",
    "RowTranslator",
    "SyncRunRepository",
    "UnitOfWork",
]
