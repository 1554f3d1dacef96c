from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from sqlalchemy.dialects import sqlite

from agriprice.adapters.sqlalchemy.mappings import UTCDateTime, mapper_registry, start_mappers


def test_start_mappers_is_idempotent() -> None:
    assert start_mappers() is start_mappers()
    assert start_mappers() is mapper_registry


def test_utc_datetime_normalises_bound_values() -> None:
    column_type = UTCDateTime()
    dialect = sqlite.dialect()
    aware = datetime(2024, 1, 10, 3, 0, tzinfo=timezone(timedelta(hours=3)))

    assert column_type.process_bind_param(aware, dialect) == datetime(2024, 1, 10, tzinfo=UTC)
    assert column_type.process_bind_param(datetime(2024, 1, 10), dialect) == datetime(
        2024, 1, 10, tzinfo=UTC
    )
    assert column_type.process_bind_param(None, dialect) is None


def test_utc_datetime_marks_loaded_values_as_utc() -> None:
    column_type = UTCDateTime()

    loaded = column_type.process_result_value(datetime(2024, 1, 10, 8), sqlite.dialect())

    assert loaded == datetime(2024, 1, 10, 8, tzinfo=UTC)
    assert loaded is not None
    assert loaded.tzinfo is UTC
