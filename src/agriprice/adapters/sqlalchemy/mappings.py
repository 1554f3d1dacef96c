"""SQLAlchemy mapping metadata for the price catalog."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from enum import StrEnum
from functools import cache
from typing import Final

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
    func,
    orm,
)
from sqlalchemy.orm import configure_mappers

from agriprice.domain.model import (
    Crop,
    CropCategory,
    Market,
    PriceEntry,
    Region,
    SyncRun,
    SyncStatus,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]
PRICE_PRECISION: Final[int] = 10
PRICE_SCALE: Final[int] = 2


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _enum_values(enum_cls: type[StrEnum]) -> list[str]:
    return [member.value for member in enum_cls]


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Reference catalog -------------------------------------------------------------

crop_table = Table(
    "crop",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String(255), nullable=False),
    Column(
        "category",
        Enum(CropCategory, native_enum=False, values_callable=_enum_values, length=32),
        nullable=False,
    ),
    Column("unit", String(20), nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", UTCDateTime(), nullable=False),
)

region_table = Table(
    "region",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String(255), nullable=False),
    Column("code", String(255), nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", UTCDateTime(), nullable=False),
)

market_table = Table(
    "market",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String(255), nullable=False),
    Column("region_id", UUIDColumnType, ForeignKey("region.id"), nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", UTCDateTime(), nullable=False),
)

# Names compare case-insensitively, so uniqueness is enforced on lower(name).
Index("uq_crop_lower_name", func.lower(crop_table.c.name), unique=True)
Index("uq_region_lower_name", func.lower(region_table.c.name), unique=True)
Index(
    "uq_market_lower_name_region",
    func.lower(market_table.c.name),
    market_table.c.region_id,
    unique=True,
)

# Facts -------------------------------------------------------------------------

price_entry_table = Table(
    "price_entry",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("crop_id", UUIDColumnType, ForeignKey("crop.id"), nullable=False),
    Column("region_id", UUIDColumnType, ForeignKey("region.id"), nullable=False),
    Column("market_id", UUIDColumnType, ForeignKey("market.id"), nullable=True),
    Column("price", Numeric(PRICE_PRECISION, PRICE_SCALE), nullable=False),
    Column("unit", String(20), nullable=False),
    Column("entry_date", UTCDateTime(), nullable=False),
    Column("source", String(50), nullable=False),
    Column("is_verified", Boolean, nullable=False, default=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_price_entry_lookup", "crop_id", "region_id", "market_id", "entry_date"),
)

# Audit trail -------------------------------------------------------------------

sync_run_table = Table(
    "sync_run",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("sync_date", Date, nullable=False),
    Column("started_at", UTCDateTime(), nullable=False),
    Column("completed_at", UTCDateTime(), nullable=True),
    Column(
        "status",
        Enum(SyncStatus, native_enum=False, values_callable=_enum_values, length=16),
        nullable=False,
    ),
    Column("records_processed", Integer, nullable=False, default=0),
    Column("records_inserted", Integer, nullable=False, default=0),
    Column("records_updated", Integer, nullable=False, default=0),
    Column("error_message", Text, nullable=True),
    Index("ix_sync_run_started_at", "started_at"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Crop, crop_table)
    mapper_registry.map_imperatively(Region, region_table)
    mapper_registry.map_imperatively(Market, market_table)
    mapper_registry.map_imperatively(PriceEntry, price_entry_table)
    mapper_registry.map_imperatively(SyncRun, sync_run_table)

    configure_mappers()
    return mapper_registry
