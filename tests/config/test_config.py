from __future__ import annotations

from pathlib import Path

import pytest

from agriprice.config import (
    ConfigurationError,
    MissingConfigurationError,
    StorageConfig,
    get_database_config,
    get_ingest_config,
    get_storage_config,
    require_env_vars,
)

_INGEST_VARS = (
    "AGRIPRICE_TRANSACTION_TIMEOUT",
    "AGRIPRICE_RETAINED_RUNS",
    "AGRIPRICE_FEED_PATH",
    "AGRIPRICE_SOURCE",
)


@pytest.fixture
def clean_ingest_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    for name in _INGEST_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AGRIPRICE_DATA_DIR", str(tmp_path))
    return tmp_path


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_require_env_vars_reports_missing_and_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)
    monkeypatch.setenv("BLANK_VAR", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR", "BLANK_VAR"])

    assert "BLANK_VAR, MISSING_VAR" in str(exc.value)
    assert exc.value.names == ("BLANK_VAR", "MISSING_VAR")


def test_storage_config_paths(tmp_path: Path) -> None:
    config = StorageConfig(data_dir=tmp_path / "data")

    assert config.feed_path() == (tmp_path / "data" / "raw" / "kamis_latest.csv").resolve()
    assert config.database_uri() == f"sqlite+pysqlite:///{(tmp_path / 'data').resolve()}/agriprice.db"
    assert (tmp_path / "data").is_dir()


def test_storage_config_honours_data_dir_override(clean_ingest_env: Path) -> None:
    assert get_storage_config().data_dir == clean_ingest_env


def test_database_uri_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"


def test_ingest_config_defaults(clean_ingest_env: Path) -> None:
    config = get_ingest_config()

    assert config.transaction_timeout_seconds == 20.0
    assert config.source == "kamis"
    assert config.retained_runs == 100
    assert config.feed_path == clean_ingest_env.resolve() / "raw" / "kamis_latest.csv"


def test_ingest_config_overrides(clean_ingest_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AGRIPRICE_TRANSACTION_TIMEOUT", "5.5")
    monkeypatch.setenv("AGRIPRICE_RETAINED_RUNS", "7")
    monkeypatch.setenv("AGRIPRICE_FEED_PATH", str(clean_ingest_env / "feed.xlsx"))
    monkeypatch.setenv("AGRIPRICE_SOURCE", "manual")

    config = get_ingest_config()

    assert config.transaction_timeout_seconds == 5.5
    assert config.retained_runs == 7
    assert config.feed_path == clean_ingest_env / "feed.xlsx"
    assert config.source == "manual"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("AGRIPRICE_TRANSACTION_TIMEOUT", "soon"),
        ("AGRIPRICE_TRANSACTION_TIMEOUT", "0"),
        ("AGRIPRICE_RETAINED_RUNS", "many"),
        ("AGRIPRICE_RETAINED_RUNS", "0"),
    ],
)
def test_ingest_config_rejects_invalid_numbers(
    clean_ingest_env: Path, monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    _ = clean_ingest_env
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_ingest_config()
