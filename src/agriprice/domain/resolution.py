"""Resolve reference names to catalog ids, creating rows on first sight."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from agriprice.domain.classification import classify, determine_unit
from agriprice.domain.errors import DuplicateEntityError
from agriprice.domain.model import Crop, Market, Region

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from agriprice.domain.model import ReferenceEntity
    from agriprice.domain.ports import IngestRepositories


log = getLogger(__name__)


class EntityResolver:
    """Find-or-insert lookups against the reference catalog.

    Lookups are case-insensitive and exact. There is no cache: every call queries the
    repositories, which share the batch session and therefore see rows created by
    earlier calls in the same transaction. A unique-constraint collision on insert
    means a concurrent batch created the row first; the resolver then re-reads it.
    """

    def __init__(self, repositories: IngestRepositories) -> None:
        self._repositories = repositories

    def resolve_crop(self, name: str) -> UUID:
        crops = self._repositories.crops

        def create() -> Crop:
            category = classify(name)
            return Crop(name=name, category=category, unit=determine_unit(category, name))

        return _find_or_create(
            lambda: crops.find_by_name(name),
            create,
            crops.add,
            kind="crop",
        )

    def resolve_region(self, name: str) -> UUID:
        regions = self._repositories.regions
        return _find_or_create(
            lambda: regions.find_by_name(name),
            lambda: Region(name=name),
            regions.add,
            kind="region",
        )

    def resolve_market(self, name: str | None, region_id: UUID) -> UUID | None:
        if name is None or not name.strip():
            return None
        markets = self._repositories.markets
        return _find_or_create(
            lambda: markets.find_by_name(name, region_id),
            lambda: Market(name=name, region_id=region_id),
            markets.add,
            kind="market",
        )

    def crop_unit(self, crop_id: UUID) -> str:
        crop = self._repositories.crops.get(crop_id)
        if crop is None:
            raise LookupError(f"Unknown crop id {crop_id}")
        return crop.unit


def _find_or_create[TEntity: ReferenceEntity](
    find: Callable[[], TEntity | None],
    build: Callable[[], TEntity],
    add: Callable[[TEntity], None],
    *,
    kind: str,
) -> UUID:
    existing = find()
    if existing is not None:
        return existing.id

    entity = build()
    try:
        add(entity)
    except DuplicateEntityError:
        winner = find()
        if winner is None:
            raise
        log.info("Concurrent insert of %s %r detected; reusing %s", kind, entity.name, winner.id)
        return winner.id

    log.info("Created %s %r (%s)", kind, entity.name, entity.id)
    return entity.id


__all__ = ["EntityResolver"]
