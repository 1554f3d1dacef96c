"""Acquire the latest price feed from the local drop location."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from agriprice.domain.errors import FeedUnavailableError
from agriprice.domain.ports import FetchedFeed

if TYPE_CHECKING:
    from pathlib import Path


log = getLogger(__name__)


class FileFeedFetcher:
    """Read the feed file the upstream export job leaves on disk."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def __call__(self) -> FetchedFeed:
        try:
            content = self.path.read_bytes()
        except FileNotFoundError as exc:
            raise FeedUnavailableError(f"Price feed not found at {self.path}") from exc
        except IsADirectoryError as exc:
            raise FeedUnavailableError(f"Price feed path {self.path} is a directory") from exc
        log.info("Fetched price feed %s (%s bytes)", self.path, len(content))
        return FetchedFeed(content=content, filename=self.path.name)


__all__ = ["FileFeedFetcher"]
