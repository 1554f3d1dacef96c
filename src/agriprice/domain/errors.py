"""Error taxonomy for feed ingestion.

``ParseError`` and ``TransactionError`` are fatal to a batch. ``RowValidationError``
and ``RowProcessingError`` are recovered per row by the batch coordinator and only
show up in the aggregate counts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


class IngestError(RuntimeError):
    """Base class for ingestion failures."""


class ParseError(IngestError):
    """Raised when a feed cannot be decoded as a supported file format."""


class RowValidationError(IngestError):
    """Raised when a single feed row is missing data or carries invalid values."""

    def __init__(self, message: str, *, field_errors: Mapping[str, str] | None = None) -> None:
        super().__init__(message)
        self.field_errors: dict[str, str] = dict(field_errors or {})


class RowProcessingError(IngestError):
    """Raised for an unexpected fault while resolving or persisting one row."""

    def __init__(self, message: str, *, row_number: int) -> None:
        super().__init__(message)
        self.row_number = row_number


class TransactionError(IngestError):
    """Raised when the batch transaction cannot complete; the whole batch is undone."""


class TransactionTimeoutError(TransactionError):
    """Raised when a batch exceeds its time budget."""


class DuplicateEntityError(IngestError):
    """Raised when inserting a reference row collides with a unique constraint."""


class FeedUnavailableError(IngestError):
    """Raised when the feed fetcher cannot provide any bytes."""


class InvalidSyncTransitionError(IngestError):
    """Raised when a sync run is moved out of a terminal state or into a non-terminal one."""
