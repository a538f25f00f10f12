"""Alembic entry points for the possync schema."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config

from possync.config import get_database_config

SCRIPTS_DIR: Final[Path] = Path(__file__).resolve().parent
# src/possync/adapters/sqlalchemy/migrations -> repository root
REPO_ROOT: Final[Path] = SCRIPTS_DIR.parents[4]
PYPROJECT_FILE: Final[Path] = REPO_ROOT / "pyproject.toml"

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def _alembic_section() -> dict[str, str]:
    if not PYPROJECT_FILE.is_file():
        return {}
    with PYPROJECT_FILE.open("rb") as handle:
        section = tomllib.load(handle).get("tool", {}).get("alembic", {})
    return {str(name): str(value) for name, value in section.items()}


def _alembic_config() -> Config:
    """Alembic settings from ``[tool.alembic]`` when running from a checkout.

    Installed wheels carry no pyproject.toml; the scripts shipped next to this
    module are used then.
    """

    section = _alembic_section()
    config = Config(toml_file=str(PYPROJECT_FILE)) if section else Config()

    configured = section.pop("script_location", None)
    scripts = SCRIPTS_DIR if configured is None else REPO_ROOT / configured
    config.set_main_option("script_location", str(scripts))
    section.pop("sqlalchemy.url", None)
    for name, value in section.items():
        config.set_main_option(name, value)
    return config


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Migrate the store to the newest revision.

    With ``engine`` the migration runs on one of its connections, which keeps
    in-memory SQLite databases alive; otherwise ``database_uri`` (or the
    configured URI) is used.
    """

    config = _alembic_config()
    if engine is None:
        config.set_main_option("sqlalchemy.url", database_uri or get_database_config().uri)
        command.upgrade(config, "head")
        return
    with engine.begin() as connection:
        config.attributes["connection"] = connection
        command.upgrade(config, "head")
