"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)
from .sync import IngestConfig, get_ingest_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "IngestConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_database_uri",
    "get_ingest_config",
    "get_storage_config",
    "require_env_vars",
]
