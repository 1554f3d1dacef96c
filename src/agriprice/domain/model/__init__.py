"""Domain model for the price catalog and ingestion audit trail."""

from __future__ import annotations

from .base import Entity, ReferenceEntity, new_id, utcnow
from .catalog import Crop, Market, Region, region_code
from .enums import CropCategory, SyncStatus
from .prices import PriceEntry, PriceObservation
from .sync_run import SyncRun

__all__ = [
    "Crop",
    "CropCategory",
    "Entity",
    "Market",
    "PriceEntry",
    "PriceObservation",
    "ReferenceEntity",
    "Region",
    "SyncRun",
    "SyncStatus",
    "new_id",
    "region_code",
    "utcnow",
]
