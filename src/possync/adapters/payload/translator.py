"""Translate POS sync payloads into domain records and results back into payloads."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from possync.domain.model import EntityKind
from possync.domain.reconciliation import (
    BatchShapeError,
    ClientRecord,
    ProductRecord,
    SaleLineRecord,
    SaleRecord,
    SyncBatch,
    TenantHint,
)

from .schema import (
    IdMappingsPayload,
    KindSummaryPayload,
    SyncBatchPayload,
    SyncResultData,
    SyncResultResponse,
    SyncStatusResponse,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pydantic_core import ErrorDetails

    from possync.domain.reconciliation import BatchResult, KindSummary, SyncStatus

    from .schema import ClientPayload, ProductPayload, SaleLinePayload, SalePayload

type SyncBatchInput = SyncBatchPayload | Mapping[str, object] | str | bytes

log = getLogger(__name__)


def parse_sync_batch(payload: SyncBatchInput) -> SyncBatch:
    """Validate a raw payload (mapping or JSON document) into a ``SyncBatch``.

    Raises ``BatchShapeError`` listing every validation problem.
    """

    try:
        if isinstance(payload, SyncBatchPayload):
            model = payload
        elif isinstance(payload, str | bytes):
            model = SyncBatchPayload.model_validate_json(payload)
        else:
            model = SyncBatchPayload.model_validate(payload)
    except ValidationError as exc:
        problems = [_describe_error(error) for error in exc.errors()]
        log.warning("Rejected sync payload with %d problems", len(problems))
        raise BatchShapeError("Invalid sync payload", problems=problems) from exc
    return to_sync_batch(model)


def to_sync_batch(model: SyncBatchPayload) -> SyncBatch:
    return SyncBatch(
        version=model.version,
        timestamp=model.timestamp,
        tenant=TenantHint(
            trade_name=model.tenant.trade_name,
            tax_id=model.tenant.tax_id,
            phone=model.tenant.phone,
        ),
        products=tuple(_product_record(product) for product in model.products),
        clients=tuple(_client_record(client) for client in model.clients),
        sales=tuple(_sale_record(sale) for sale in model.sales),
    )


def render_batch_result(result: BatchResult) -> dict[str, Any]:
    """Render a ``BatchResult`` as the JSON document the POS client consumes."""

    response = SyncResultResponse(
        success=result.success,
        message=result.message,
        data=SyncResultData(
            products_synced=result.products.succeeded,
            clients_synced=result.clients.succeeded,
            sales_synced=result.sales.succeeded,
            mappings=IdMappingsPayload(
                products=dict(result.mapping_for(EntityKind.PRODUCT)),
                clients=dict(result.mapping_for(EntityKind.CLIENT)),
                sales=dict(result.mapping_for(EntityKind.SALE)),
            ),
            summary={
                "productos": _summary_payload(result.products),
                "clientes": _summary_payload(result.clients),
                "ventas": _summary_payload(result.sales),
            },
        ),
        errors=list(result.errors) or None,
    )
    return response.model_dump(mode="json", by_alias=True, exclude_none=True)


def render_sync_status(status: SyncStatus) -> dict[str, Any]:
    response = SyncStatusResponse(
        last_sync=status.last_sync_at, synced_sales=status.synced_sale_count
    )
    return response.model_dump(mode="json", by_alias=True)


def _product_record(payload: ProductPayload) -> ProductRecord:
    return ProductRecord(
        local_id=payload.local_id,
        canonical_id=payload.remote_id,
        name=payload.name,
        price=payload.price,
        stock=payload.stock,
    )


def _client_record(payload: ClientPayload) -> ClientRecord:
    return ClientRecord(
        local_id=payload.local_id,
        canonical_id=payload.remote_id,
        name=payload.name,
        phone=payload.phone,
        note=payload.note,
    )


def _sale_line_record(payload: SaleLinePayload) -> SaleLineRecord:
    return SaleLineRecord(
        local_id=payload.local_id,
        product_local_id=payload.product_local_id,
        quantity=payload.quantity,
        unit_price=payload.unit_price,
        subtotal=payload.subtotal,
    )


def _sale_record(payload: SalePayload) -> SaleRecord:
    return SaleRecord(
        local_id=payload.local_id,
        canonical_id=payload.remote_id,
        issued_at=payload.issued_at,
        total=payload.total,
        client_local_id=payload.client_local_id,
        document_type=payload.document_type,
        series=payload.series,
        number=payload.number,
        payment_status=payload.payment_status,
        fulfillment_status=payload.fulfillment_status,
        advance=payload.advance,
        balance=payload.balance,
        notes=payload.notes,
        payment_method=payload.payment_method,
        lines=tuple(_sale_line_record(line) for line in payload.lines),
    )


def _summary_payload(summary: KindSummary) -> KindSummaryPayload:
    return KindSummaryPayload(
        created=summary.created,
        matched_by_canonical_id=summary.matched_by_canonical_id,
        matched_by_natural_key=summary.matched_by_natural_key,
        failed=summary.failed,
    )


def _describe_error(error: ErrorDetails) -> str:
    location = ".".join(str(part) for part in error["loc"]) or "payload"
    return f"{location}: {error['msg']}"
