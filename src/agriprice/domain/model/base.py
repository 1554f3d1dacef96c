"""Base building blocks: identity and creation timestamps."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4


def new_id() -> UUID:
    return uuid4()


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class Entity:
    """Internal identity exists immediately in the domain."""

    id: UUID = field(default_factory=new_id)


@dataclass(eq=False, kw_only=True)
class ReferenceEntity(Entity):
    """Catalog rows that ingestion looks up or lazily creates."""

    name: str
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
