"""Alembic helpers for keeping the price catalog schema current."""

from __future__ import annotations

import tomllib
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config

from agriprice.config import get_database_uri

PROJECT_ROOT: Final[Path] = Path(__file__).resolve().parents[5]
PYPROJECT_PATH: Final[Path] = PROJECT_ROOT / "pyproject.toml"
MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent
# Keys applied explicitly below; everything else in [tool.alembic] is passed through.
_RESOLVED_OPTIONS: Final[frozenset[str]] = frozenset(
    {"script_location", "prepend_sys_path", "sqlalchemy.url"}
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


log = getLogger(__name__)


def _load_pyproject_options() -> dict[str, str]:
    """Read ``[tool.alembic]`` from a source checkout; empty when installed as a wheel."""

    if not PYPROJECT_PATH.is_file():
        return {}
    with PYPROJECT_PATH.open("rb") as pyproject_file:
        document = tomllib.load(pyproject_file)
    section = document.get("tool", {}).get("alembic", {})
    return {str(key): str(value) for key, value in section.items()}


def _resolve_path(value: str | None, default: Path) -> Path:
    if value is None:
        return default
    candidate = Path(value)
    return candidate if candidate.is_absolute() else (PROJECT_ROOT / candidate).resolve()


def _build_config() -> Config:
    options = _load_pyproject_options()
    config = Config()

    script_path = _resolve_path(options.get("script_location"), MIGRATIONS_PATH)
    if not script_path.is_dir():
        script_path = MIGRATIONS_PATH
    config.set_main_option("script_location", str(script_path))
    config.set_main_option(
        "prepend_sys_path", str(_resolve_path(options.get("prepend_sys_path"), PROJECT_ROOT))
    )
    if "sqlalchemy.url" in options:
        config.set_main_option("sqlalchemy.url", options["sqlalchemy.url"])
    for key, value in options.items():
        if key not in _RESOLVED_OPTIONS:
            config.set_main_option(key, value)

    config.attributes["pyproject_options"] = options
    return config


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Upgrade the database schema to the latest revision."""

    config = _build_config()
    if engine is not None:
        log.debug("Upgrading schema on %s", engine.url.render_as_string())
        with engine.begin() as connection:
            config.attributes["connection"] = connection
            command.upgrade(config, "head")
        return
    config.set_main_option("sqlalchemy.url", database_uri or get_database_uri())
    command.upgrade(config, "head")
