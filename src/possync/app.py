"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING

from possync.adapters.payload import parse_sync_batch
from possync.adapters.sqlalchemy.unit_of_work import SqlAlchemySyncUnitOfWork, is_started, startup
from possync.config import get_tenant_sync_config
from possync.domain.ports.unit_of_work import SyncUnitOfWork
from possync.domain.reconciliation import (
    ReconciliationEngine,
    SyncBatch,
    SyncStatus,
    get_sync_status,
)
from possync.domain.reconciliation.materialize import utc_now

if TYPE_CHECKING:
    from possync.adapters.payload import SyncBatchInput
    from possync.config import TenantSyncConfig
    from possync.domain.reconciliation import BatchResult

UnitOfWorkFactory = Callable[[], SyncUnitOfWork]
Clock = Callable[[], datetime]


log = getLogger(__name__)


def _ensure_started(unit_of_work_factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemySyncUnitOfWork


def reconcile_offline_batch(
    payload: SyncBatchInput | SyncBatch,
    *,
    tenant_id: int,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: TenantSyncConfig | None = None,
    clock: Clock | None = None,
) -> BatchResult:
    """Reconcile one offline upload for ``tenant_id`` and commit it.

    The payload is validated before any write; ``BatchShapeError`` rejects the
    whole call. Record-level problems are reported in the returned result.
    """

    batch = payload if isinstance(payload, SyncBatch) else parse_sync_batch(payload)
    effective_uow = _ensure_started(unit_of_work_factory)
    effective_config = config or get_tenant_sync_config()

    with effective_uow() as uow:
        engine = ReconciliationEngine(uow, effective_config, clock=clock or utc_now)
        result = engine.reconcile(tenant_id, batch)
        uow.commit()

    log.info(
        "Committed offline batch for tenant %s: products=%s, clients=%s, sales=%s, errors=%s",
        tenant_id,
        result.products.succeeded,
        result.clients.succeeded,
        result.sales.succeeded,
        len(result.errors),
    )
    return result


def sync_status(
    tenant_id: int,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SyncStatus:
    """Report when ``tenant_id`` last synced and how many offline sales it has."""

    effective_uow = _ensure_started(unit_of_work_factory)
    with effective_uow() as uow:
        return get_sync_status(uow, tenant_id)
