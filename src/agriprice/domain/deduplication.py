"""Same-day duplicate suppression for price facts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from agriprice.domain.time_windows import day_window

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from agriprice.domain.ports import PriceEntryRepository


class DedupGuard:
    """Reports whether a fact for the same crop, region and market already exists that day.

    Re-running the same feed on one day is therefore harmless. Legitimate same-day
    corrections from another source are suppressed too; they need an explicit
    update path.
    """

    def __init__(self, price_entries: PriceEntryRepository) -> None:
        self._price_entries = price_entries

    def is_duplicate(
        self,
        *,
        crop_id: UUID,
        region_id: UUID,
        market_id: UUID | None,
        entry_date: datetime,
    ) -> bool:
        return self._price_entries.exists_in_window(
            crop_id=crop_id,
            region_id=region_id,
            market_id=market_id,
            window=day_window(entry_date),
        )


__all__ = ["DedupGuard"]
