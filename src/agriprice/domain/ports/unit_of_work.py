"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contextlib import AbstractContextManager
    from types import TracebackType

    from agriprice.domain.ports.persistence import (
        CropRepository,
        MarketRepository,
        PriceEntryRepository,
        RegionRepository,
        SyncRunRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def savepoint(self) -> AbstractContextManager[None]:
        """Nested scope that is undone on error without ending the outer transaction."""
        ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class IngestRepositories(RepositoryCollection):
    """Repositories required to reconcile a price feed and audit its sync runs."""

    crops: CropRepository
    regions: RegionRepository
    markets: MarketRepository
    price_entries: PriceEntryRepository
    sync_runs: SyncRunRepository


type IngestUnitOfWork = UnitOfWork[IngestRepositories]
