from __future__ import annotations

import pytest

from possync.app import reconcile_offline_batch, sync_status
from possync.config import TenantSyncConfig
from possync.domain.reconciliation import BatchShapeError
from tests.helpers.batches import SYNC_TIME, fixed_clock, make_batch, make_payload, make_sale
from tests.helpers.fakes import FakeSyncUnitOfWork


def test_reconcile_commits_the_unit_of_work() -> None:
    uow = FakeSyncUnitOfWork()

    result = reconcile_offline_batch(
        make_payload(),
        tenant_id=1,
        unit_of_work_factory=lambda: uow,
        config=TenantSyncConfig(),
        clock=fixed_clock,
    )

    assert uow.committed is True
    assert uow.rolled_back is False
    assert result.sales.created == 2
    assert {sale.synced_at for sale in uow.sales.items} == {SYNC_TIME}


def test_reconcile_accepts_domain_batches() -> None:
    uow = FakeSyncUnitOfWork()
    batch = make_batch(sales=(make_sale(1, total="2.00"),))

    result = reconcile_offline_batch(
        batch, tenant_id=3, unit_of_work_factory=lambda: uow, config=TenantSyncConfig()
    )

    assert result.sales.created == 1
    assert uow.sales.items[0].tenant_id == 3


def test_invalid_payload_never_opens_a_unit_of_work() -> None:
    def factory() -> FakeSyncUnitOfWork:
        raise AssertionError("unit of work must not be opened")

    with pytest.raises(BatchShapeError):
        reconcile_offline_batch({"version": ""}, tenant_id=1, unit_of_work_factory=factory)


def test_engine_errors_roll_back_the_batch() -> None:
    uow = FakeSyncUnitOfWork()
    duplicated = make_batch(sales=(make_sale(1, total="1.00"), make_sale(1, total="1.00")))

    with pytest.raises(BatchShapeError):
        reconcile_offline_batch(
            duplicated, tenant_id=1, unit_of_work_factory=lambda: uow, config=TenantSyncConfig()
        )

    assert uow.committed is False
    assert uow.rolled_back is True


def test_sync_status_reads_offline_sales() -> None:
    uow = FakeSyncUnitOfWork()
    reconcile_offline_batch(
        make_payload(),
        tenant_id=1,
        unit_of_work_factory=lambda: uow,
        config=TenantSyncConfig(),
        clock=fixed_clock,
    )

    status = sync_status(1, unit_of_work_factory=lambda: uow)

    assert status.last_sync_at == SYNC_TIME
    assert status.synced_sale_count == 2
