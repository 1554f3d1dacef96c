"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from agriprice.adapters.feeds import FileFeedFetcher, read_price_feed, translate_price_row
from agriprice.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyIngestUnitOfWork,
    is_started,
    startup,
)
from agriprice.config import get_ingest_config
from agriprice.domain import data_integration
from agriprice.domain.ports.unit_of_work import IngestUnitOfWork
from agriprice.domain.sync_runs import DEFAULT_PAGE_SIZE, SyncRunLogger

if TYPE_CHECKING:
    from pathlib import Path

    from agriprice.domain.data_integration import IngestSummary, SyncOutcome
    from agriprice.domain.ports import FeedFetcher
    from agriprice.domain.sync_runs import SyncRunPage, SyncStatusReport

UnitOfWorkFactory = Callable[[], IngestUnitOfWork]


log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def _unit_of_work_factory(override: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if override is not None:
        return override
    _ensure_started()
    return SqlAlchemyIngestUnitOfWork


def process_price_file(
    content: bytes,
    filename: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> IngestSummary:
    """Ingest an uploaded feed file in one transaction."""

    config = get_ingest_config()
    return data_integration.process_price_file(
        content,
        filename,
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
        reader=read_price_feed,
        translate=translate_price_row,
        source=config.source,
        timeout_seconds=config.transaction_timeout_seconds,
    )


def process_price_path(
    path: Path,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> IngestSummary:
    log.info("Processing price file from %s", path)
    return process_price_file(
        path.read_bytes(),
        path.name,
        unit_of_work_factory=unit_of_work_factory,
    )


def sync_price_feed(
    *,
    feed_path: Path | None = None,
    fetcher: FeedFetcher | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SyncOutcome:
    """Ingest the latest feed and record the attempt as a sync run."""

    config = get_ingest_config()
    effective_fetcher = fetcher or FileFeedFetcher(feed_path or config.feed_path)
    log.info("Starting price feed sync: source=%s", config.source)

    outcome = data_integration.sync_price_feed(
        fetcher=effective_fetcher,
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
        reader=read_price_feed,
        translate=translate_price_row,
        source=config.source,
        timeout_seconds=config.transaction_timeout_seconds,
    )

    log.info(
        "Finished price feed sync %s: inserted=%s, skipped=%s, errors=%s",
        outcome.run_id,
        outcome.summary.inserted,
        outcome.summary.skipped,
        outcome.summary.errors,
    )
    return outcome


def get_sync_status(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> SyncStatusReport:
    return SyncRunLogger(_unit_of_work_factory(unit_of_work_factory)).status()


def list_sync_runs(
    *,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SyncRunPage:
    return SyncRunLogger(_unit_of_work_factory(unit_of_work_factory)).list_runs(
        page=page, limit=limit
    )


def prune_sync_runs(
    *,
    keep: int | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    """Delete old sync runs, keeping ``keep`` (or the configured number of) latest runs."""

    retained = keep if keep is not None else get_ingest_config().retained_runs
    return SyncRunLogger(_unit_of_work_factory(unit_of_work_factory)).prune_runs(keep=retained)
