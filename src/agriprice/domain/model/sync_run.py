"""Audit record for one top-level ingestion invocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from agriprice.domain.errors import InvalidSyncTransitionError

from .base import Entity, utcnow
from .enums import SyncStatus

if TYPE_CHECKING:
    from datetime import date, datetime


@dataclass(eq=False, kw_only=True)
class SyncRun(Entity):
    """Lifecycle: ``running`` -> ``completed`` | ``failed``; both end states are final."""

    started_at: datetime = field(default_factory=utcnow)
    sync_date: date | None = None
    status: SyncStatus = SyncStatus.RUNNING
    completed_at: datetime | None = None
    records_processed: int = 0
    records_inserted: int = 0
    records_updated: int = 0
    error_message: str | None = None

    def __post_init__(self) -> None:
        if self.sync_date is None:
            self.sync_date = self.started_at.date()

    @property
    def is_running(self) -> bool:
        return self.status is SyncStatus.RUNNING

    def finish(
        self,
        *,
        status: SyncStatus,
        processed: int,
        inserted: int,
        updated: int,
        completed_at: datetime,
        error_message: str | None = None,
    ) -> None:
        if not status.is_terminal:
            raise InvalidSyncTransitionError(f"Cannot finish sync run with status {status}")
        if not self.is_running:
            raise InvalidSyncTransitionError(
                f"Sync run {self.id} already finished with status {self.status}"
            )
        self.status = status
        self.records_processed = processed
        self.records_inserted = inserted
        self.records_updated = updated
        self.completed_at = completed_at
        self.error_message = error_message
