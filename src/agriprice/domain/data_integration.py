"""Application services for reconciling price feeds into the catalog."""

from __future__ import annotations

import time
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from agriprice.domain.deduplication import DedupGuard
from agriprice.domain.errors import (
    RowProcessingError,
    RowValidationError,
    TransactionTimeoutError,
)
from agriprice.domain.model import PriceEntry, SyncStatus
from agriprice.domain.resolution import EntityResolver
from agriprice.domain.sync_runs import SyncRunLogger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from uuid import UUID

    from agriprice.domain.model import PriceObservation
    from agriprice.domain.ports import (
        FeedFetcher,
        FeedReader,
        IngestRepositories,
        IngestUnitOfWork,
        RawRow,
        RowTranslator,
    )
    from agriprice.domain.time_windows import Clock

DEFAULT_TIMEOUT_SECONDS = 20.0
DEFAULT_SOURCE = "kamis"

type MonotonicClock = Callable[[], float]


log = getLogger(__name__)


@dataclass(slots=True)
class IngestSummary:
    """Aggregate outcome of one feed file."""

    inserted: int = 0
    skipped: int = 0
    errors: int = 0
    total_rows: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "inserted": self.inserted,
            "skipped": self.skipped,
            "errors": self.errors,
            "total_rows": self.total_rows,
        }


@dataclass(frozen=True, slots=True)
class SyncOutcome:
    run_id: UUID
    summary: IngestSummary


class _Deadline:
    def __init__(self, timeout_seconds: float, clock: MonotonicClock) -> None:
        self._clock = clock
        self._timeout = timeout_seconds
        self._expires_at = clock() + timeout_seconds

    def check(self) -> None:
        if self._clock() > self._expires_at:
            raise TransactionTimeoutError(
                f"Batch exceeded its {self._timeout:g}s transaction budget"
            )


def ingest_price_rows(
    rows: Iterable[RawRow],
    *,
    unit_of_work: IngestUnitOfWork,
    translate: RowTranslator,
    source: str = DEFAULT_SOURCE,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    clock: MonotonicClock = time.monotonic,
) -> IngestSummary:
    """Reconcile ``rows`` into the open unit of work without committing.

    Each row runs in its own savepoint: invalid rows and duplicates count as skipped,
    unexpected faults count as errors, and neither stops the batch. The deadline is
    checked before each row and once more after the last; ``TransactionTimeoutError``
    propagates so the caller's unit of work rolls the whole batch back.
    """

    repositories = unit_of_work.repositories
    resolver = EntityResolver(repositories)
    guard = DedupGuard(repositories.price_entries)
    deadline = _Deadline(timeout_seconds, clock)
    summary = IngestSummary()

    for row_number, row in enumerate(rows, start=1):
        deadline.check()
        summary.total_rows += 1

        try:
            observation = translate(row)
        except RowValidationError as exc:
            summary.skipped += 1
            log.debug("Skipping row %s: %s", row_number, exc)
            continue

        try:
            inserted = _import_row(
                observation,
                row_number=row_number,
                unit_of_work=unit_of_work,
                resolver=resolver,
                guard=guard,
                source=source,
            )
        except RowProcessingError:
            summary.errors += 1
            log.exception("Row import error at row %s: %r", row_number, dict(row))
            continue

        if inserted:
            summary.inserted += 1
        else:
            summary.skipped += 1

    deadline.check()
    return summary


def _import_row(
    observation: PriceObservation,
    *,
    row_number: int,
    unit_of_work: IngestUnitOfWork,
    resolver: EntityResolver,
    guard: DedupGuard,
    source: str,
) -> bool:
    try:
        with unit_of_work.savepoint():
            return _reconcile_observation(
                observation, resolver, guard, unit_of_work.repositories, source
            )
    except Exception as exc:
        raise RowProcessingError(
            f"Row {row_number} could not be imported: {exc}", row_number=row_number
        ) from exc


def _reconcile_observation(
    observation: PriceObservation,
    resolver: EntityResolver,
    guard: DedupGuard,
    repositories: IngestRepositories,
    source: str,
) -> bool:
    crop_id = resolver.resolve_crop(observation.crop_name)
    region_id = resolver.resolve_region(observation.region_name)
    market_id = resolver.resolve_market(observation.market_name, region_id)

    if guard.is_duplicate(
        crop_id=crop_id,
        region_id=region_id,
        market_id=market_id,
        entry_date=observation.observed_at,
    ):
        return False

    entry = PriceEntry(
        crop_id=crop_id,
        region_id=region_id,
        market_id=market_id,
        price=observation.price,
        unit=resolver.crop_unit(crop_id),
        entry_date=observation.observed_at,
        source=source,
        is_verified=True,
    )
    repositories.price_entries.add(entry)
    return True


def process_price_file(
    content: bytes,
    filename: str,
    *,
    unit_of_work_factory: Callable[[], IngestUnitOfWork],
    reader: FeedReader,
    translate: RowTranslator,
    source: str = DEFAULT_SOURCE,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    clock: MonotonicClock = time.monotonic,
) -> IngestSummary:
    """Parse a feed file and reconcile it in a single all-or-nothing transaction."""

    rows = reader(content, filename)
    log.info("Processing price feed %s (%s bytes)", filename, len(content))

    with unit_of_work_factory() as uow:
        summary = ingest_price_rows(
            rows,
            unit_of_work=uow,
            translate=translate,
            source=source,
            timeout_seconds=timeout_seconds,
            clock=clock,
        )
        uow.commit()

    log.info(
        "Finished price feed %s: inserted=%s, skipped=%s, errors=%s, total_rows=%s",
        filename,
        summary.inserted,
        summary.skipped,
        summary.errors,
        summary.total_rows,
    )
    return summary


def sync_price_feed(
    *,
    fetcher: FeedFetcher,
    unit_of_work_factory: Callable[[], IngestUnitOfWork],
    reader: FeedReader,
    translate: RowTranslator,
    source: str = DEFAULT_SOURCE,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    clock: MonotonicClock = time.monotonic,
    wall_clock: Clock | None = None,
) -> SyncOutcome:
    """Fetch the latest feed and ingest it, recording the attempt as a sync run.

    The run is finalised on both paths; failures are re-raised after the run has
    been marked failed.
    """

    runs = SyncRunLogger(unit_of_work_factory, clock=wall_clock)
    run_id = runs.start_run()

    try:
        feed = fetcher()
        summary = process_price_file(
            feed.content,
            feed.filename,
            unit_of_work_factory=unit_of_work_factory,
            reader=reader,
            translate=translate,
            source=source,
            timeout_seconds=timeout_seconds,
            clock=clock,
        )
    except BaseException as exc:
        log.error("Price feed sync %s failed: %s", run_id, exc)  # noqa: TRY400
        runs.finish_run(
            run_id,
            processed=0,
            inserted=0,
            updated=0,
            status=SyncStatus.FAILED,
            error_message=str(exc) or type(exc).__name__,
        )
        raise

    runs.finish_run(
        run_id,
        processed=summary.total_rows,
        inserted=summary.inserted,
        updated=0,
        status=SyncStatus.COMPLETED,
    )
    return SyncOutcome(run_id=run_id, summary=summary)


__all__ = [
    "DEFAULT_SOURCE",
    "DEFAULT_TIMEOUT_SECONDS",
    "IngestSummary",
    "SyncOutcome",
    "ingest_price_rows",
    "process_price_file",
    "sync_price_feed",
]
