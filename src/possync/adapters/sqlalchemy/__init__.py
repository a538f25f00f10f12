"""SQLAlchemy adapter package for possync."""

from __future__ import annotations

from .mappings import (
    TABLE_BY_CLASS,
    create_all_tables,
    mapper_registry,
    start_mappers,
)
from .repositories import (
    SqlAlchemyClientRepository,
    SqlAlchemyProductRepository,
    SqlAlchemySaleRepository,
    SqlAlchemyUnitOfMeasureRepository,
)
from .unit_of_work import (
    SqlAlchemySyncUnitOfWork,
    StartupError,
    create_sqlalchemy_engine,
    shutdown,
    startup,
)

__all__ = [
    "TABLE_BY_CLASS",
    "SqlAlchemyClientRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemySaleRepository",
    "SqlAlchemySyncUnitOfWork",
    "SqlAlchemyUnitOfMeasureRepository",
    "StartupError",
    "create_all_tables",
    "create_sqlalchemy_engine",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
