"""Reference catalog: crops, regions and markets."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .base import ReferenceEntity
from .enums import CropCategory

if TYPE_CHECKING:
    from uuid import UUID

_WHITESPACE = re.compile(r"\s")


def region_code(name: str) -> str:
    """Derive a region code: upper-case with every whitespace character replaced by ``_``."""

    return _WHITESPACE.sub("_", name.upper())


@dataclass(eq=False, kw_only=True)
class Crop(ReferenceEntity):
    category: CropCategory = CropCategory.GENERAL
    unit: str = "kg"


@dataclass(eq=False, kw_only=True)
class Region(ReferenceEntity):
    code: str = ""

    def __post_init__(self) -> None:
        if not self.code:
            self.code = region_code(self.name)


@dataclass(eq=False, kw_only=True)
class Market(ReferenceEntity):
    region_id: UUID
