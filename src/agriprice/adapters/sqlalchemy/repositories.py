"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from agriprice.adapters.sqlalchemy.mappings import (
    crop_table,
    market_table,
    price_entry_table,
    region_table,
    sync_run_table,
)
from agriprice.domain.errors import DuplicateEntityError
from agriprice.domain.model import Crop, Market, PriceEntry, Region, SyncRun

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.orm import Session

    from agriprice.domain.model import ReferenceEntity
    from agriprice.domain.time_windows import DayWindow


class SqlAlchemyReferenceRepository[TEntity: ReferenceEntity]:
    """Shared insert path for catalog rows guarded by a unique name index."""

    def __init__(self, session: Session, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls

    def add(self, entity: TEntity) -> None:
        # The savepoint flushes immediately so a concurrent insert of the same name
        # surfaces here instead of at commit.
        try:
            with self.session.begin_nested():
                self.session.add(entity)
        except IntegrityError as exc:
            raise DuplicateEntityError(
                f"{self._entity_cls.__name__} {entity.name!r} already exists"
            ) from exc


class SqlAlchemyCropRepository(SqlAlchemyReferenceRepository[Crop]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Crop)

    def get(self, crop_id: UUID) -> Crop | None:
        return self.session.get(Crop, crop_id)

    def find_by_name(self, name: str) -> Crop | None:
        stmt = select(Crop).where(func.lower(crop_table.c.name) == func.lower(name)).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyRegionRepository(SqlAlchemyReferenceRepository[Region]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Region)

    def find_by_name(self, name: str) -> Region | None:
        stmt = select(Region).where(func.lower(region_table.c.name) == func.lower(name)).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyMarketRepository(SqlAlchemyReferenceRepository[Market]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Market)

    def find_by_name(self, name: str, region_id: UUID) -> Market | None:
        stmt = (
            select(Market)
            .where(func.lower(market_table.c.name) == func.lower(name))
            .where(market_table.c.region_id == region_id)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyPriceEntryRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: PriceEntry) -> None:
        self.session.add(entity)

    def exists_in_window(
        self,
        *,
        crop_id: UUID,
        region_id: UUID,
        market_id: UUID | None,
        window: DayWindow,
    ) -> bool:
        market_clause = (
            price_entry_table.c.market_id.is_(None)
            if market_id is None
            else price_entry_table.c.market_id == market_id
        )
        stmt = (
            select(price_entry_table.c.id)
            .where(price_entry_table.c.crop_id == crop_id)
            .where(price_entry_table.c.region_id == region_id)
            .where(market_clause)
            .where(price_entry_table.c.entry_date.between(window.start, window.end))
            .limit(1)
        )
        return self.session.execute(stmt).first() is not None

    def count(self) -> int:
        stmt = select(func.count()).select_from(price_entry_table)
        return self.session.execute(stmt).scalar_one()


class SqlAlchemySyncRunRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: SyncRun) -> None:
        self.session.add(entity)

    def get(self, run_id: UUID) -> SyncRun | None:
        return self.session.get(SyncRun, run_id)

    def latest(self) -> SyncRun | None:
        stmt = select(SyncRun).order_by(sync_run_table.c.started_at.desc()).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_recent(self, *, limit: int, offset: int = 0) -> Sequence[SyncRun]:
        stmt = (
            select(SyncRun)
            .order_by(sync_run_table.c.started_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return self.session.execute(stmt).scalars().all()

    def count(self) -> int:
        stmt = select(func.count()).select_from(sync_run_table)
        return self.session.execute(stmt).scalar_one()

    def delete_all_but_latest(self, keep: int) -> int:
        stale_ids = list(
            self.session.execute(
                select(sync_run_table.c.id)
                .order_by(sync_run_table.c.started_at.desc())
                .offset(keep)
            ).scalars()
        )
        if not stale_ids:
            return 0
        self.session.execute(delete(sync_run_table).where(sync_run_table.c.id.in_(stale_ids)))
        return len(stale_ids)
