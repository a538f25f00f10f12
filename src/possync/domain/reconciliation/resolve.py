"""Natural-key resolution against the canonical store.

Responsibilities of this stage:
- find an existing canonical product or client by its natural key
- report "not found" without mutating persistence state

Duplicate natural keys are not assumed impossible: rows created before the
store enforced uniqueness can still collide. The repositories break ties by the
lowest canonical id, and the resolver logs every ambiguous lookup.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal, overload

from possync.domain.model import Client, EntityKind, Product

from .contracts import NaturalKey
from .errors import NotFoundError

if TYPE_CHECKING:
    from possync.domain.ports.persistence import CatalogRepository
    from possync.domain.ports.unit_of_work import SyncRepositories

log = getLogger(__name__)

PRODUCT_KEY_ATTRIBUTE = "description"
CLIENT_KEY_ATTRIBUTE = "name"
CLIENT_DOCUMENT_ATTRIBUTE = "document_number"


def product_key(name: str) -> NaturalKey:
    return NaturalKey(PRODUCT_KEY_ATTRIBUTE, name)


def client_key(name: str) -> NaturalKey:
    return NaturalKey(CLIENT_KEY_ATTRIBUTE, name)


def document_key(document_number: str) -> NaturalKey:
    return NaturalKey(CLIENT_DOCUMENT_ATTRIBUTE, document_number)


@dataclass(slots=True)
class NaturalKeyResolver:
    """Pure lookup of canonical records by natural key within one tenant."""

    repositories: SyncRepositories

    @overload
    def resolve(
        self, tenant_id: int, kind: Literal[EntityKind.PRODUCT], key: NaturalKey
    ) -> Product | None: ...
    @overload
    def resolve(
        self, tenant_id: int, kind: Literal[EntityKind.CLIENT], key: NaturalKey
    ) -> Client | None: ...
    @overload
    def resolve(
        self, tenant_id: int, kind: EntityKind, key: NaturalKey
    ) -> Product | Client | None: ...
    def resolve(
        self, tenant_id: int, kind: EntityKind, key: NaturalKey
    ) -> Product | Client | None:
        repository = self._repository_for(kind)
        match = repository.find_by_natural_key(tenant_id, key)
        if match is None:
            return None
        candidates = repository.count_by_natural_key(tenant_id, key)
        if candidates > 1:
            log.warning(
                "Ambiguous natural key for %s %s in tenant %s: %d candidates, using id %s",
                kind,
                key,
                tenant_id,
                candidates,
                match.id,
            )
        return match

    @overload
    def require(
        self, tenant_id: int, kind: Literal[EntityKind.PRODUCT], key: NaturalKey
    ) -> Product: ...
    @overload
    def require(
        self, tenant_id: int, kind: Literal[EntityKind.CLIENT], key: NaturalKey
    ) -> Client: ...
    @overload
    def require(self, tenant_id: int, kind: EntityKind, key: NaturalKey) -> Product | Client: ...
    def require(self, tenant_id: int, kind: EntityKind, key: NaturalKey) -> Product | Client:
        match = self.resolve(tenant_id, kind, key)
        if match is None:
            raise NotFoundError(f"No {kind} with {key} in tenant {tenant_id}")
        return match

    def _repository_for(
        self, kind: EntityKind
    ) -> CatalogRepository[Product] | CatalogRepository[Client]:
        if kind is EntityKind.PRODUCT:
            return self.repositories.products
        if kind is EntityKind.CLIENT:
            return self.repositories.clients
        raise ValueError(f"{kind} records have no natural key")
