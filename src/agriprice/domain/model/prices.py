"""Price facts and the validated observations they are built from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .base import Entity, utcnow

if TYPE_CHECKING:
    from datetime import datetime
    from decimal import Decimal
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class PriceObservation:
    """One validated feed row, not yet reconciled against the catalog."""

    crop_name: str
    region_name: str
    price: Decimal
    observed_at: datetime
    market_name: str | None = None


@dataclass(eq=False, kw_only=True)
class PriceEntry(Entity):
    """A single observed price; written once per entity triple and calendar day."""

    crop_id: UUID
    region_id: UUID
    price: Decimal
    entry_date: datetime
    source: str
    unit: str = "kg"
    market_id: UUID | None = None
    is_verified: bool = False
    created_at: datetime = field(default_factory=utcnow)
