"""In-memory fakes for price feed ingestion tests."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Literal

from agriprice.domain.errors import DuplicateEntityError
from agriprice.domain.model import (
    Crop,
    Market,
    PriceEntry,
    PriceObservation,
    Region,
    SyncRun,
)
from agriprice.domain.ports import IngestRepositories

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence
    from types import TracebackType
    from uuid import UUID

    from agriprice.domain.ports import RawRow
    from agriprice.domain.time_windows import DayWindow


def make_observation(
    crop: str = "Maize",
    region: str = "Central Kenya",
    *,
    market: str | None = None,
    price: str = "45.50",
    observed_at: datetime | None = None,
) -> PriceObservation:
    return PriceObservation(
        crop_name=crop,
        region_name=region,
        market_name=market,
        price=Decimal(price),
        observed_at=observed_at or datetime(2024, 1, 10, tzinfo=UTC),
    )


def price_row(
    crop: str = "Maize",
    region: str = "Central Kenya",
    price: str = "45.50",
    entry_date: str = "2024-01-10",
    *,
    market: str | None = None,
) -> dict[str, object]:
    row: dict[str, object] = {
        "Crop": crop,
        "Region": region,
        "Price": price,
        "Date": entry_date,
    }
    if market is not None:
        row["Market"] = market
    return row


class FakeCropRepository:
    def __init__(self, items: Iterable[Crop] = ()) -> None:
        self.items: list[Crop] = list(items)

    def add(self, entity: Crop) -> None:
        if self.find_by_name(entity.name) is not None:
            raise DuplicateEntityError(f"Crop {entity.name!r} already exists")
        self.items.append(entity)

    def get(self, crop_id: UUID) -> Crop | None:
        return next((crop for crop in self.items if crop.id == crop_id), None)

    def find_by_name(self, name: str) -> Crop | None:
        return next((crop for crop in self.items if crop.name.lower() == name.lower()), None)


class FakeRegionRepository:
    def __init__(self, items: Iterable[Region] = ()) -> None:
        self.items: list[Region] = list(items)

    def add(self, entity: Region) -> None:
        if self.find_by_name(entity.name) is not None:
            raise DuplicateEntityError(f"Region {entity.name!r} already exists")
        self.items.append(entity)

    def find_by_name(self, name: str) -> Region | None:
        return next((region for region in self.items if region.name.lower() == name.lower()), None)


class FakeMarketRepository:
    def __init__(self, items: Iterable[Market] = ()) -> None:
        self.items: list[Market] = list(items)

    def add(self, entity: Market) -> None:
        if self.find_by_name(entity.name, entity.region_id) is not None:
            raise DuplicateEntityError(f"Market {entity.name!r} already exists")
        self.items.append(entity)

    def find_by_name(self, name: str, region_id: UUID) -> Market | None:
        return next(
            (
                market
                for market in self.items
                if market.name.lower() == name.lower() and market.region_id == region_id
            ),
            None,
        )


class FakePriceEntryRepository:
    def __init__(self, items: Iterable[PriceEntry] = ()) -> None:
        self.items: list[PriceEntry] = list(items)

    def add(self, entity: PriceEntry) -> None:
        self.items.append(entity)

    def exists_in_window(
        self,
        *,
        crop_id: UUID,
        region_id: UUID,
        market_id: UUID | None,
        window: DayWindow,
    ) -> bool:
        return any(
            entry.crop_id == crop_id
            and entry.region_id == region_id
            and entry.market_id == market_id
            and window.contains(entry.entry_date)
            for entry in self.items
        )


class FakeSyncRunRepository:
    def __init__(self, items: Iterable[SyncRun] = ()) -> None:
        self.items: list[SyncRun] = list(items)

    def add(self, entity: SyncRun) -> None:
        self.items.append(entity)

    def get(self, run_id: UUID) -> SyncRun | None:
        return next((run for run in self.items if run.id == run_id), None)

    def _ordered(self) -> list[SyncRun]:
        return sorted(self.items, key=lambda run: run.started_at, reverse=True)

    def latest(self) -> SyncRun | None:
        ordered = self._ordered()
        return ordered[0] if ordered else None

    def list_recent(self, *, limit: int, offset: int = 0) -> Sequence[SyncRun]:
        return self._ordered()[offset : offset + limit]

    def count(self) -> int:
        return len(self.items)

    def delete_all_but_latest(self, keep: int) -> int:
        kept = self._ordered()[:keep]
        removed = len(self.items) - len(kept)
        self.items = kept
        return removed


def make_repositories() -> IngestRepositories:
    return IngestRepositories(
        crops=FakeCropRepository(),
        regions=FakeRegionRepository(),
        markets=FakeMarketRepository(),
        price_entries=FakePriceEntryRepository(),
        sync_runs=FakeSyncRunRepository(),
    )


@dataclass
class FakeIngestUnitOfWork:
    """Unit of work over shared fake repositories; records lifecycle calls."""

    _repositories: IngestRepositories = field(default_factory=make_repositories)
    committed: bool = False
    rolled_back: bool = False
    savepoints: int = 0
    failed_savepoints: int = 0

    @property
    def repositories(self) -> IngestRepositories:
        return self._repositories

    def __enter__(self) -> FakeIngestUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        return False

    @contextmanager
    def savepoint(self) -> Iterator[None]:
        self.savepoints += 1
        try:
            yield
        except Exception:
            self.failed_savepoints += 1
            raise

    def commit(self) -> None:
        self.committed = True

    def rollback(self) -> None:
        self.rolled_back = True


def shared_unit_of_work_factory(
    repositories: IngestRepositories | None = None,
) -> tuple[Callable[[], FakeIngestUnitOfWork], list[FakeIngestUnitOfWork]]:
    """Return a factory whose units of work share ``repositories``, plus the list it fills."""

    shared = repositories or make_repositories()
    created: list[FakeIngestUnitOfWork] = []

    def factory() -> FakeIngestUnitOfWork:
        uow = FakeIngestUnitOfWork(shared)
        created.append(uow)
        return uow

    return factory, created


def rows_reader(rows: Sequence[RawRow]) -> Callable[[bytes, str], Iterator[RawRow]]:
    """A feed reader that ignores the buffer and yields ``rows``."""

    def reader(content: bytes, filename: str) -> Iterator[RawRow]:
        _ = (content, filename)
        return iter(rows)

    return reader


class StepClock:
    """Monotonic clock returning scripted readings, repeating the last one."""

    def __init__(self, readings: Sequence[float]) -> None:
        self._readings = list(readings)
        self.calls = 0

    def __call__(self) -> float:
        index = min(self.calls, len(self._readings) - 1)
        self.calls += 1
        return self._readings[index]
