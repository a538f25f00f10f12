"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    CatalogRepository,
    ClientRepository,
    ProductRepository,
    Repository,
    SaleRepository,
    TenantRepository,
    UnitOfMeasureRepository,
)
from .unit_of_work import (
    RepositoryCollection,
    SyncRepositories,
    SyncUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "CatalogRepository",
    "ClientRepository",
    "ProductRepository",
    "Repository",
    "RepositoryCollection",
    "SaleRepository",
    "SyncRepositories",
    "SyncUnitOfWork",
    "TenantRepository",
    "UnitOfMeasureRepository",
    "UnitOfWork",
]
