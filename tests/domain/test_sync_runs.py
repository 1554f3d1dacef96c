from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from agriprice.domain.errors import InvalidSyncTransitionError
from agriprice.domain.model import SyncRun, SyncStatus
from agriprice.domain.sync_runs import SyncRunLogger
from tests.helpers.ingest import FakeSyncRunRepository, shared_unit_of_work_factory


class TickingClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(minutes=1)
        return current


def _logger() -> tuple[SyncRunLogger, FakeSyncRunRepository]:
    factory, _ = shared_unit_of_work_factory()
    repository = factory().repositories.sync_runs
    assert isinstance(repository, FakeSyncRunRepository)
    clock = TickingClock(datetime(2024, 1, 10, 8, tzinfo=UTC))
    return SyncRunLogger(factory, clock=clock), repository


def test_status_without_runs() -> None:
    logger, _ = _logger()

    report = logger.status()

    assert report.last_sync_timestamp is None
    assert report.records_synced == 0
    assert report.is_running is False


def test_start_and_finish_run() -> None:
    logger, repository = _logger()

    run_id = logger.start_run()
    running = logger.status()
    logger.finish_run(run_id, processed=5, inserted=3, updated=1, status=SyncStatus.COMPLETED)

    assert running.is_running is True
    run = repository.get(run_id)
    assert run is not None
    assert run.status is SyncStatus.COMPLETED
    assert run.completed_at == datetime(2024, 1, 10, 8, 1, tzinfo=UTC)
    report = logger.status()
    assert report.last_sync_timestamp == datetime(2024, 1, 10, 8, tzinfo=UTC)
    assert report.records_synced == 4
    assert report.is_running is False


def test_finish_unknown_run_raises() -> None:
    logger, _ = _logger()

    with pytest.raises(LookupError):
        logger.finish_run(uuid4(), processed=0, inserted=0, updated=0, status=SyncStatus.FAILED)


def test_finish_run_twice_is_rejected() -> None:
    logger, _ = _logger()
    run_id = logger.start_run()
    logger.finish_run(
        run_id, processed=0, inserted=0, updated=0, status=SyncStatus.FAILED, error_message="x"
    )

    with pytest.raises(InvalidSyncTransitionError):
        logger.finish_run(run_id, processed=1, inserted=1, updated=0, status=SyncStatus.COMPLETED)


def test_list_runs_paginates_newest_first() -> None:
    logger, repository = _logger()
    base = datetime(2024, 1, 1, tzinfo=UTC)
    runs = [SyncRun(started_at=base + timedelta(days=offset)) for offset in range(5)]
    repository.items.extend(runs)

    page = logger.list_runs(page=2, limit=2)

    assert [run.id for run in page.runs] == [runs[2].id, runs[1].id]
    assert page.total == 5
    assert page.pages == 3


@pytest.mark.parametrize(("page", "limit"), [(0, 20), (1, 0)])
def test_list_runs_rejects_bad_paging(page: int, limit: int) -> None:
    logger, _ = _logger()

    with pytest.raises(ValueError, match="at least 1"):
        logger.list_runs(page=page, limit=limit)


def test_prune_runs_keeps_latest() -> None:
    logger, repository = _logger()
    base = datetime(2024, 1, 1, tzinfo=UTC)
    runs = [SyncRun(started_at=base + timedelta(days=offset)) for offset in range(4)]
    repository.items.extend(runs)

    removed = logger.prune_runs(keep=1)

    assert removed == 3
    assert [run.id for run in repository.items] == [runs[-1].id]


def test_prune_runs_requires_keeping_one() -> None:
    logger, _ = _logger()

    with pytest.raises(ValueError, match="At least one"):
        logger.prune_runs(keep=0)
