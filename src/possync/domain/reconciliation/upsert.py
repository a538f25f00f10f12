"""Find-or-create of canonical products and clients.

The first applicable rule wins:

1. a canonical id hint that exists for the tenant: overwrite the mutable fields
2. a natural-key match: return the existing record unchanged
3. otherwise create the record with tenant defaults

A unique-constraint violation on create means another writer inserted the same
natural key first; the create is then retried as a natural-key match.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from possync.domain.model import Client, EntityKind, Product, UnitOfMeasure

from .contracts import NaturalKey, UpsertOutcome
from .errors import ConstraintViolationError, NotFoundError
from .financials import split_tax_inclusive
from .resolve import client_key, document_key, product_key

if TYPE_CHECKING:
    from collections.abc import Callable

    from possync.config import TenantSyncConfig
    from possync.domain.model import TenantEntity
    from possync.domain.ports.persistence import Repository, TenantRepository
    from possync.domain.ports.unit_of_work import SyncUnitOfWork

    from .records import ClientRecord, ProductRecord
    from .resolve import NaturalKeyResolver

log = getLogger(__name__)


@dataclass(slots=True)
class EntityUpserter:
    uow: SyncUnitOfWork
    config: TenantSyncConfig
    resolver: NaturalKeyResolver

    # --- Products ---------------------------------------------------------

    def upsert_product(
        self, tenant_id: int, record: ProductRecord
    ) -> tuple[Product, UpsertOutcome]:
        unit_value = split_tax_inclusive(record.price, self.config.tax_rate).base
        key = product_key(record.name)

        def refresh(product: Product) -> None:
            product.reprice(
                description=record.name, unit_price=record.price, unit_value=unit_value
            )
            product.stock = record.stock

        def build() -> Product:
            products = self.uow.repositories.products
            return Product(
                tenant_id=tenant_id,
                code=f"{self.config.product_code_prefix}{products.count(tenant_id) + 1:03d}",
                description=record.name,
                unit=self._default_unit(),
                tax_affectation_code=self.config.tax_affectation_code,
                unit_price=record.price,
                unit_value=unit_value,
                tax_percentage=self.config.tax_percentage,
                stock=record.stock,
            )

        return self._upsert(
            tenant_id,
            kind=EntityKind.PRODUCT,
            repository=self.uow.repositories.products,
            canonical_id=record.canonical_id,
            key=key,
            find=lambda: self.resolver.resolve(tenant_id, EntityKind.PRODUCT, key),
            refresh=refresh,
            build=build,
        )

    # --- Clients ----------------------------------------------------------

    def upsert_client(self, tenant_id: int, record: ClientRecord) -> tuple[Client, UpsertOutcome]:
        key = client_key(record.name)

        def refresh(client: Client) -> None:
            client.update_contact(name=record.name, phone=record.phone, address=record.note)

        def build() -> Client:
            return Client(
                tenant_id=tenant_id,
                name=record.name,
                document_type_code=self.config.document_type_code,
                phone=record.phone,
                address=record.note,
            )

        return self._upsert(
            tenant_id,
            kind=EntityKind.CLIENT,
            repository=self.uow.repositories.clients,
            canonical_id=record.canonical_id,
            key=key,
            find=lambda: self.resolver.resolve(tenant_id, EntityKind.CLIENT, key),
            refresh=refresh,
            build=build,
        )

    def ensure_generic_client(self, tenant_id: int) -> tuple[Client, UpsertOutcome]:
        """Return the tenant's generic client, creating it on first use."""

        by_document = document_key(self.config.generic_client_document_number)
        by_name = client_key(self.config.generic_client_name)
        try:
            existing = self.resolver.require(tenant_id, EntityKind.CLIENT, by_document)
        except NotFoundError:
            log.info("Creating generic client for tenant %s", tenant_id)
        else:
            return existing, UpsertOutcome.MATCHED_BY_NATURAL_KEY

        def find() -> Client | None:
            # a regular client may already use the generic display name
            return self.resolver.resolve(
                tenant_id, EntityKind.CLIENT, by_document
            ) or self.resolver.resolve(tenant_id, EntityKind.CLIENT, by_name)

        return self._create(
            kind=EntityKind.CLIENT,
            repository=self.uow.repositories.clients,
            key=by_document,
            find=find,
            build=lambda: Client(
                tenant_id=tenant_id,
                name=self.config.generic_client_name,
                document_type_code=self.config.document_type_code,
                document_number=self.config.generic_client_document_number,
            ),
        )

    # --- Shared upsert steps ----------------------------------------------

    def _upsert[T: TenantEntity](
        self,
        tenant_id: int,
        *,
        kind: EntityKind,
        repository: TenantRepository[T],
        canonical_id: int | None,
        key: NaturalKey,
        find: Callable[[], T | None],
        refresh: Callable[[T], None],
        build: Callable[[], T],
    ) -> tuple[T, UpsertOutcome]:
        if canonical_id is not None:
            existing = repository.get(tenant_id, canonical_id)
            if existing is not None:
                refresh(existing)
                repository.update(existing)
                log.debug("Matched %s %s by canonical id", kind, canonical_id)
                return existing, UpsertOutcome.MATCHED_BY_CANONICAL_ID
            log.debug(
                "Canonical id %s is unknown for %s in tenant %s, trying %s",
                canonical_id,
                kind,
                tenant_id,
                key,
            )

        matched = find()
        if matched is not None:
            log.debug("Matched %s by %s", kind, key)
            return matched, UpsertOutcome.MATCHED_BY_NATURAL_KEY

        return self._create(kind=kind, repository=repository, key=key, find=find, build=build)

    def _create[T: TenantEntity](
        self,
        *,
        kind: EntityKind,
        repository: Repository[T],
        key: NaturalKey,
        find: Callable[[], T | None],
        build: Callable[[], T],
    ) -> tuple[T, UpsertOutcome]:
        entity = build()
        try:
            with self.uow.savepoint():
                repository.add(entity)
        except ConstraintViolationError:
            matched = find()
            if matched is None:
                raise
            log.info("%s with %s was created concurrently, using id %s", kind, key, matched.id)
            return matched, UpsertOutcome.MATCHED_BY_NATURAL_KEY
        log.debug("Created %s %s with %s", kind, entity.id, key)
        return entity, UpsertOutcome.CREATED

    def _default_unit(self) -> UnitOfMeasure:
        units = self.uow.repositories.units
        unit = units.get_by_code(self.config.unit_code)
        if unit is not None:
            return unit
        unit = UnitOfMeasure(code=self.config.unit_code, name=self.config.unit_name)
        try:
            with self.uow.savepoint():
                units.add(unit)
        except ConstraintViolationError:
            existing = units.get_by_code(self.config.unit_code)
            if existing is None:
                raise
            return existing
        log.info("Created unit of measure %s", unit.code)
        return unit
