"""Adapters turning price feed files into validated observations."""

from __future__ import annotations

from .fetcher import FileFeedFetcher
from .reader import is_spreadsheet, read_price_feed
from .schema import PriceRowPayload, extract_price_fields, translate_price_row

__all__ = [
    "FileFeedFetcher",
    "PriceRowPayload",
    "extract_price_fields",
    "is_spreadsheet",
    "read_price_feed",
    "translate_price_row",
]
