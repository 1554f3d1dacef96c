"""Ports for acquiring and decoding external price feeds."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from agriprice.domain.model import PriceObservation

type RawRow = Mapping[str, object]


@dataclass(frozen=True, slots=True)
class FetchedFeed:
    content: bytes
    filename: str


@runtime_checkable
class FeedFetcher(Protocol):
    """Callable port returning the bytes of the latest feed file."""

    def __call__(self) -> FetchedFeed: ...


@runtime_checkable
class FeedReader(Protocol):
    """Decode a buffer into an ordered, single-pass stream of raw rows.

    Implementations raise ``ParseError`` eagerly for undecodable input.
    """

    def __call__(self, content: bytes, filename: str) -> Iterator[RawRow]: ...


@runtime_checkable
class RowTranslator(Protocol):
    """Extract and validate the price fields of one raw row.

    Implementations raise ``RowValidationError`` for unusable rows.
    """

    def __call__(self, row: RawRow) -> PriceObservation: ...


__all__ = ["FeedFetcher", "FeedReader", "FetchedFeed", "RawRow", "RowTranslator"]
