"""Ports for persisting catalog rows, price facts and sync runs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from agriprice.domain.model import Crop, Market, PriceEntry, Region, SyncRun

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from agriprice.domain.time_windows import DayWindow


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class CropRepository(Repository[Crop], Protocol):
    """``add`` raises ``DuplicateEntityError`` when the name is already taken."""

    def get(self, crop_id: UUID) -> Crop | None: ...

    def find_by_name(self, name: str) -> Crop | None: ...


@runtime_checkable
class RegionRepository(Repository[Region], Protocol):
    def find_by_name(self, name: str) -> Region | None: ...


@runtime_checkable
class MarketRepository(Repository[Market], Protocol):
    def find_by_name(self, name: str, region_id: UUID) -> Market | None: ...


@runtime_checkable
class PriceEntryRepository(Repository[PriceEntry], Protocol):
    def exists_in_window(
        self,
        *,
        crop_id: UUID,
        region_id: UUID,
        market_id: UUID | None,
        window: DayWindow,
    ) -> bool: ...


@runtime_checkable
class SyncRunRepository(Repository[SyncRun], Protocol):
    def get(self, run_id: UUID) -> SyncRun | None: ...

    def latest(self) -> SyncRun | None: ...

    def list_recent(self, *, limit: int, offset: int = 0) -> Sequence[SyncRun]: ...

    def count(self) -> int: ...

    def delete_all_but_latest(self, keep: int) -> int: ...
