"""Ports for persisting domain aggregates.

Every lookup is tenant scoped except for the shared unit-of-measure catalog.
``find_by_natural_key`` returns the lowest-id match when a key is ambiguous.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from possync.domain.model import Client, Product, Sale, UnitOfMeasure

if TYPE_CHECKING:
    from datetime import datetime

    from possync.domain.reconciliation.contracts import NaturalKey


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None:
        """Persist a new entity and assign its id."""
        ...


@runtime_checkable
class TenantRepository[TEntity](Repository[TEntity], Protocol):
    """Find-by-id and update primitives for tenant-scoped aggregates."""

    def get(self, tenant_id: int, entity_id: int) -> TEntity | None: ...

    def update(self, entity: TEntity) -> None: ...


@runtime_checkable
class CatalogRepository[TEntity](TenantRepository[TEntity], Protocol):
    """Repository contract for entities addressable by natural key."""

    def find_by_natural_key(self, tenant_id: int, key: NaturalKey) -> TEntity | None: ...

    def count_by_natural_key(self, tenant_id: int, key: NaturalKey) -> int: ...


@runtime_checkable
class ProductRepository(CatalogRepository[Product], Protocol):
    """Repository contract for products."""

    def count(self, tenant_id: int) -> int: ...


@runtime_checkable
class ClientRepository(CatalogRepository[Client], Protocol):
    """Repository contract for clients."""


@runtime_checkable
class SaleRepository(TenantRepository[Sale], Protocol):
    """Repository contract for sales."""

    def count_offline(self, tenant_id: int) -> int: ...

    def latest_offline_sync(self, tenant_id: int) -> datetime | None: ...


@runtime_checkable
class UnitOfMeasureRepository(Repository[UnitOfMeasure], Protocol):
    """Repository contract for the shared unit-of-measure catalog."""

    def get_by_code(self, code: str) -> UnitOfMeasure | None: ...
