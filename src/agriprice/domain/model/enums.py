"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class CropCategory(StrEnum):
    FARM_INPUTS = "farm_inputs"
    ANIMAL_FEEDS = "animal_feeds"
    PROCESSED_PRODUCTS = "processed_products"
    CASH_CROPS = "cash_crops"
    LIVESTOCK = "livestock"
    POULTRY = "poultry"
    FISHERIES = "fisheries"
    ANIMAL_PRODUCTS = "animal_products"
    CEREALS = "cereals"
    LEGUMES = "legumes"
    ROOTS_TUBERS = "roots_tubers"
    FRUITS = "fruits"
    VEGETABLES = "vegetables"
    SPICES_HERBS = "spices_herbs"
    GENERAL = "general"


class SyncStatus(StrEnum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not SyncStatus.RUNNING
