"""Audit trail of top-level ingestion invocations."""

from __future__ import annotations

import math
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from agriprice.domain.model import SyncRun, SyncStatus
from agriprice.domain.time_windows import utcnow

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime
    from uuid import UUID

    from agriprice.domain.ports import IngestUnitOfWork
    from agriprice.domain.time_windows import Clock

DEFAULT_PAGE_SIZE = 20
DEFAULT_RETAINED_RUNS = 100


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SyncStatusReport:
    last_sync_timestamp: datetime | None
    records_synced: int
    is_running: bool


@dataclass(frozen=True, slots=True)
class SyncRunPage:
    runs: Sequence[SyncRun]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class SyncRunLogger:
    """Record the start and end of each sync.

    Every call uses its own unit of work so that run records survive the rollback of
    a failed ingest transaction.
    """

    def __init__(
        self,
        unit_of_work_factory: Callable[[], IngestUnitOfWork],
        *,
        clock: Clock | None = None,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._clock = clock or utcnow

    def start_run(self) -> UUID:
        run = SyncRun(started_at=self._clock())
        with self._unit_of_work_factory() as uow:
            uow.repositories.sync_runs.add(run)
            uow.commit()
        log.info("Started sync run %s", run.id)
        return run.id

    def finish_run(
        self,
        run_id: UUID,
        *,
        processed: int,
        inserted: int,
        updated: int,
        status: SyncStatus,
        error_message: str | None = None,
    ) -> None:
        with self._unit_of_work_factory() as uow:
            run = uow.repositories.sync_runs.get(run_id)
            if run is None:
                raise LookupError(f"Unknown sync run {run_id}")
            run.finish(
                status=status,
                processed=processed,
                inserted=inserted,
                updated=updated,
                completed_at=self._clock(),
                error_message=error_message,
            )
            uow.commit()
        log.info(
            "Finished sync run %s: status=%s, processed=%s, inserted=%s, updated=%s",
            run_id,
            status,
            processed,
            inserted,
            updated,
        )

    def status(self) -> SyncStatusReport:
        with self._unit_of_work_factory() as uow:
            latest = uow.repositories.sync_runs.latest()
            if latest is None:
                return SyncStatusReport(last_sync_timestamp=None, records_synced=0, is_running=False)
            return SyncStatusReport(
                last_sync_timestamp=latest.started_at,
                records_synced=(latest.records_inserted or 0) + (latest.records_updated or 0),
                is_running=latest.is_running,
            )

    def list_runs(self, *, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> SyncRunPage:
        if page < 1:
            raise ValueError("Page must be at least 1")
        if limit < 1:
            raise ValueError("Limit must be at least 1")
        with self._unit_of_work_factory() as uow:
            repository = uow.repositories.sync_runs
            runs = list(repository.list_recent(limit=limit, offset=(page - 1) * limit))
            total = repository.count()
        return SyncRunPage(runs=runs, page=page, limit=limit, total=total)

    def prune_runs(self, *, keep: int = DEFAULT_RETAINED_RUNS) -> int:
        """Delete all but the ``keep`` most recent runs; returns the number removed."""

        if keep < 1:
            raise ValueError("At least one sync run must be kept")
        with self._unit_of_work_factory() as uow:
            removed = uow.repositories.sync_runs.delete_all_but_latest(keep)
            uow.commit()
        if removed:
            log.info("Pruned %s old sync runs", removed)
        return removed


__all__ = ["SyncRunLogger", "SyncRunPage", "SyncStatusReport"]
