from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from possync.adapters.payload import render_batch_result
from possync.app import reconcile_offline_batch, sync_status
from possync.config import TenantSyncConfig
from possync.domain.model import EntityKind, PaymentStatus, SubmissionStatus
from possync.domain.reconciliation import BatchShapeError, document_key
from tests.helpers.batches import SYNC_TIME, fixed_clock, make_payload

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

    from possync.adapters.sqlalchemy import SqlAlchemySyncUnitOfWork
    from possync.domain.reconciliation import BatchResult

type UowFactory = Callable[[], SqlAlchemySyncUnitOfWork]


def _sync(factory: UowFactory, payload: dict[str, Any], tenant_id: int = 1) -> BatchResult:
    return reconcile_offline_batch(
        payload,
        tenant_id=tenant_id,
        unit_of_work_factory=factory,
        config=TenantSyncConfig(),
        clock=fixed_clock,
    )


@pytest.mark.integration
def test_full_batch_is_persisted(sqlite_unit_of_work: UowFactory) -> None:
    result = _sync(sqlite_unit_of_work, make_payload())

    assert result.success is True
    assert result.errors == []
    assert result.message == "Sync completed: 2 products, 1 clients, 2 sales"

    product_ids = result.mapping_for(EntityKind.PRODUCT)
    client_ids = result.mapping_for(EntityKind.CLIENT)
    sale_ids = result.mapping_for(EntityKind.SALE)
    with sqlite_unit_of_work() as uow:
        repos = uow.repositories
        water = repos.products.get(1, product_ids[1])
        crackers = repos.products.get(1, product_ids[2])
        assert water is not None
        assert crackers is not None
        assert (water.code, crackers.code) == ("PR001", "PR002")
        assert water.unit_value == Decimal(2)
        assert water.unit_code == "NIU"

        rosa = repos.clients.get(1, client_ids[1])
        assert rosa is not None
        assert rosa.address == "Jr. Lima 123"
        generic = repos.clients.find_by_natural_key(1, document_key("00000000"))
        assert generic is not None

        first = repos.sales.get(1, sale_ids[1])
        second = repos.sales.get(1, sale_ids[2])
        assert first is not None
        assert second is not None
        assert first.client_id == rosa.id
        assert second.client_id == generic.id
        assert first.payment_method == "YAPE"
        assert second.payment_method == "EFECTIVO"
        assert first.payment_status is PaymentStatus.COMPLETED
        assert second.payment_status is PaymentStatus.PENDING_PAYMENT
        assert first.submission_status is SubmissionStatus.NOT_APPLICABLE
        assert first.taxable_amount == Decimal(5)
        assert first.tax_amount == Decimal("0.90")
        assert [line.description for line in first.lines] == [
            "Agua San Luis 625ml",
            "Galleta Soda Field",
        ]
        assert first.lines[0].base_amount == Decimal(4)
        assert first.synced_at == SYNC_TIME

    document = render_batch_result(result)
    assert "errors" not in document
    assert document["data"]["ventasCreadas"] == 2


@pytest.mark.integration
def test_resubmission_with_remote_ids_does_not_duplicate(
    sqlite_unit_of_work: UowFactory,
) -> None:
    first = _sync(sqlite_unit_of_work, make_payload())

    payload = make_payload()
    for kind, key in ((EntityKind.PRODUCT, "productos"), (EntityKind.SALE, "ventas")):
        mapping = first.mapping_for(kind)
        for item in payload[key]:
            item["remoteId"] = mapping[item["localId"]]
    payload["ventas"][1]["estadoPago"] = "PAGADO"

    second = _sync(sqlite_unit_of_work, payload)

    assert second.errors == []
    assert second.products.matched_by_canonical_id == 2
    assert second.clients.matched_by_natural_key == 1
    assert second.sales.matched_by_canonical_id == 2
    assert second.mapping_for(EntityKind.SALE) == first.mapping_for(EntityKind.SALE)
    status = sync_status(1, unit_of_work_factory=sqlite_unit_of_work)
    assert status.synced_sale_count == 2
    with sqlite_unit_of_work() as uow:
        sale = uow.repositories.sales.get(1, first.mapping_for(EntityKind.SALE)[2])
        assert sale is not None
        assert sale.payment_status is PaymentStatus.COMPLETED
        assert len(sale.lines) == 1


@pytest.mark.integration
def test_rejected_product_fails_alone(sqlite_unit_of_work: UowFactory) -> None:
    payload = make_payload()
    payload["productos"][1]["precio"] = -1.18

    result = _sync(sqlite_unit_of_work, payload)

    assert result.success is True
    assert result.products.created == 1
    assert result.products.failed == 1
    assert result.sales.created == 2
    assert len(result.errors) == 3
    assert result.errors[0].startswith("Product Galleta Soda Field: ")
    assert result.errors[1:] == [
        "Sale B001-15: line 2 skipped, product local id 2 is not mapped",
        "Sale B001-16: line 1 skipped, product local id 2 is not mapped",
    ]
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.products.count(1) == 1
        sale = uow.repositories.sales.get(1, result.mapping_for(EntityKind.SALE)[1])
        assert sale is not None
        assert len(sale.lines) == 1

    document = render_batch_result(result)
    assert document["data"]["resumen"]["productos"]["fallidos"] == 1
    assert len(document["errors"]) == 3


@pytest.mark.integration
def test_tenants_are_isolated(sqlite_unit_of_work: UowFactory) -> None:
    first = _sync(sqlite_unit_of_work, make_payload(), tenant_id=1)
    second = _sync(sqlite_unit_of_work, make_payload(), tenant_id=2)

    assert second.products.created == 2
    assert second.clients.created == 1
    assert set(first.mapping_for(EntityKind.PRODUCT).values()).isdisjoint(
        second.mapping_for(EntityKind.PRODUCT).values()
    )
    assert sync_status(2, unit_of_work_factory=sqlite_unit_of_work).synced_sale_count == 2


@pytest.mark.integration
def test_sync_status_before_and_after(sqlite_unit_of_work: UowFactory) -> None:
    before = sync_status(1, unit_of_work_factory=sqlite_unit_of_work)
    _sync(sqlite_unit_of_work, make_payload())
    after = sync_status(1, unit_of_work_factory=sqlite_unit_of_work)

    assert before.last_sync_at is None
    assert before.synced_sale_count == 0
    assert after.last_sync_at == SYNC_TIME
    assert after.synced_sale_count == 2


@pytest.mark.integration
def test_malformed_upload_writes_nothing(sqlite_unit_of_work: UowFactory) -> None:
    payload = make_payload()
    payload["productos"].append(dict(payload["productos"][0]))

    with pytest.raises(BatchShapeError, match="duplicate product local id 1"):
        _sync(sqlite_unit_of_work, payload)

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.products.count(1) == 0
