"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging

# migration and engine chatter is only useful when debugging
_NOISY_LOGGERS = ("alembic", "sqlalchemy.engine")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger with a terse CLI format.

    Below DEBUG, Alembic and SQLAlchemy engine loggers are capped at WARNING so
    that every startup does not print the migration log. ``force=True`` replaces
    handlers installed earlier (tests, embedding applications).
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    noisy_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)
