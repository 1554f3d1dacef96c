"""Calendar-day windows used to treat same-day re-ingestion as duplicate."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Interpret naive timestamps as UTC and normalise aware ones to UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class DayWindow:
    """Inclusive bounds of one UTC calendar day."""

    start: datetime
    end: datetime

    @property
    def day(self) -> date:
        return self.start.date()

    def contains(self, moment: datetime) -> bool:
        return self.start <= ensure_utc(moment) <= self.end


def day_window(moment: datetime | date) -> DayWindow:
    """Return the ``[00:00, 23:59:59.999999]`` window of the day containing ``moment``."""

    if isinstance(moment, datetime):
        day = ensure_utc(moment).date()
    else:
        day = moment
    start = datetime.combine(day, time.min, tzinfo=UTC)
    end = start + timedelta(days=1) - timedelta(microseconds=1)
    return DayWindow(start=start, end=end)


__all__ = ["Clock", "DayWindow", "day_window", "ensure_utc", "utcnow"]
