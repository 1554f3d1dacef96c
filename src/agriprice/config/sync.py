"""Ingestion and sync defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .env import env_float, env_int, optional_env_var
from .errors import ConfigurationError
from .storage import StorageConfig, get_storage_config

DEFAULT_TRANSACTION_TIMEOUT_SECONDS = 20.0
DEFAULT_PRICE_SOURCE = "kamis"
DEFAULT_RETAINED_SYNC_RUNS = 100


@dataclass(frozen=True, slots=True)
class IngestConfig:
    feed_path: Path
    transaction_timeout_seconds: float = DEFAULT_TRANSACTION_TIMEOUT_SECONDS
    source: str = DEFAULT_PRICE_SOURCE
    retained_runs: int = DEFAULT_RETAINED_SYNC_RUNS


def get_ingest_config(*, storage: StorageConfig | None = None) -> IngestConfig:
    timeout = env_float("AGRIPRICE_TRANSACTION_TIMEOUT", DEFAULT_TRANSACTION_TIMEOUT_SECONDS)
    if timeout <= 0:
        raise ConfigurationError("AGRIPRICE_TRANSACTION_TIMEOUT must be positive")
    retained = env_int("AGRIPRICE_RETAINED_RUNS", DEFAULT_RETAINED_SYNC_RUNS)
    if retained < 1:
        raise ConfigurationError("AGRIPRICE_RETAINED_RUNS must be at least 1")

    feed_override = optional_env_var("AGRIPRICE_FEED_PATH")
    if feed_override is not None:
        feed_path = Path(feed_override).expanduser()
    else:
        feed_path = (storage or get_storage_config()).feed_path()

    return IngestConfig(
        feed_path=feed_path,
        transaction_timeout_seconds=timeout,
        source=optional_env_var("AGRIPRICE_SOURCE") or DEFAULT_PRICE_SOURCE,
        retained_runs=retained,
    )
