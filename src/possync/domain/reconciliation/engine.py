"""Batch orchestration for offline sync.

A batch moves through ``START -> PRODUCTS -> CLIENTS -> SALES -> DONE``. Phases
run strictly in that order because sales reference the ids recorded for
products and clients. Every record runs inside its own savepoint: a record that
fails is rolled back alone and becomes a ``RecordFailure``, the others are kept.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from possync.config import TenantSyncConfig
from possync.domain.model import EntityKind

from .contracts import BatchResult, IdMapping, RecordFailure, RecordSuccess
from .errors import SyncError
from .materialize import SaleMaterializer, utc_now
from .records import validate_batch
from .resolve import NaturalKeyResolver
from .upsert import EntityUpserter

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from possync.domain.ports.unit_of_work import SyncUnitOfWork

    from .contracts import RecordResult, UpsertOutcome
    from .records import ClientRecord, ProductRecord, SaleRecord, SyncBatch

log = getLogger(__name__)


class BatchPhase(StrEnum):
    START = "start"
    PROCESSING_PRODUCTS = "processing_products"
    PROCESSING_CLIENTS = "processing_clients"
    PROCESSING_SALES = "processing_sales"
    DONE = "done"


type _RecordHandler = Callable[[], tuple[int, UpsertOutcome, tuple[str, ...]]]


@dataclass(slots=True)
class ReconciliationEngine:
    """Reconcile one offline batch against the canonical store.

    The engine writes through ``uow`` but never commits; the caller owns the
    transaction. It keeps no state between ``reconcile`` calls.
    """

    uow: SyncUnitOfWork
    config: TenantSyncConfig = field(default_factory=TenantSyncConfig)
    clock: Callable[[], datetime] = utc_now

    def reconcile(self, tenant_id: int, batch: SyncBatch) -> BatchResult:
        validate_batch(batch)
        log.info(
            "Reconciling batch %s for tenant %s (%s): %d products, %d clients, %d sales",
            batch.version,
            tenant_id,
            batch.tenant.trade_name,
            len(batch.products),
            len(batch.clients),
            len(batch.sales),
        )

        id_mapping = IdMapping()
        resolver = NaturalKeyResolver(self.uow.repositories)
        upserter = EntityUpserter(self.uow, self.config, resolver)
        materializer = SaleMaterializer(self.uow, self.config, upserter, clock=self.clock)
        results: list[RecordResult] = []

        _enter(BatchPhase.PROCESSING_PRODUCTS, tenant_id)
        for product in batch.products:
            results.append(
                self._run_record(
                    EntityKind.PRODUCT,
                    product,
                    id_mapping,
                    _product_handler(upserter, tenant_id, product),
                )
            )

        _enter(BatchPhase.PROCESSING_CLIENTS, tenant_id)
        for client in batch.clients:
            results.append(
                self._run_record(
                    EntityKind.CLIENT,
                    client,
                    id_mapping,
                    _client_handler(upserter, tenant_id, client),
                )
            )

        _enter(BatchPhase.PROCESSING_SALES, tenant_id)
        for sale in batch.sales:
            results.append(
                self._run_record(
                    EntityKind.SALE,
                    sale,
                    id_mapping,
                    _sale_handler(materializer, tenant_id, sale, id_mapping),
                )
            )

        _enter(BatchPhase.DONE, tenant_id)
        result = BatchResult.from_results(results, id_mapping=id_mapping)
        log.info(
            "%s for tenant %s (%d errors)", result.message, tenant_id, len(result.errors)
        )
        return result

    def _run_record(
        self,
        kind: EntityKind,
        record: ProductRecord | ClientRecord | SaleRecord,
        id_mapping: IdMapping,
        handler: _RecordHandler,
    ) -> RecordResult:
        try:
            with self.uow.savepoint():
                canonical_id, outcome, warnings = handler()
        except SyncError as exc:
            log.warning("%s failed: %s", record.label, exc)
            return RecordFailure(
                kind=kind, local_id=record.local_id, label=record.label, error=str(exc)
            )

        id_mapping.record(kind, record.local_id, canonical_id)
        log.debug(
            "%s (local id %s) -> id %s, %s",
            record.label,
            record.local_id,
            canonical_id,
            outcome,
        )
        return RecordSuccess(
            kind=kind,
            local_id=record.local_id,
            label=record.label,
            canonical_id=canonical_id,
            outcome=outcome,
            warnings=warnings,
        )


def _enter(phase: BatchPhase, tenant_id: int) -> None:
    log.debug("Tenant %s batch phase: %s", tenant_id, phase)


def _product_handler(
    upserter: EntityUpserter, tenant_id: int, record: ProductRecord
) -> _RecordHandler:
    def handle() -> tuple[int, UpsertOutcome, tuple[str, ...]]:
        product, outcome = upserter.upsert_product(tenant_id, record)
        return product.require_id(), outcome, ()

    return handle


def _client_handler(
    upserter: EntityUpserter, tenant_id: int, record: ClientRecord
) -> _RecordHandler:
    def handle() -> tuple[int, UpsertOutcome, tuple[str, ...]]:
        client, outcome = upserter.upsert_client(tenant_id, record)
        return client.require_id(), outcome, ()

    return handle


def _sale_handler(
    materializer: SaleMaterializer, tenant_id: int, record: SaleRecord, id_mapping: IdMapping
) -> _RecordHandler:
    def handle() -> tuple[int, UpsertOutcome, tuple[str, ...]]:
        materialized = materializer.materialize(tenant_id, record, id_mapping)
        return materialized.sale.require_id(), materialized.outcome, materialized.line_errors

    return handle
