"""Wire format of the POS client's offline sync endpoint."""

from __future__ import annotations

from .schema import (
    ClientPayload,
    ProductPayload,
    SaleLinePayload,
    SalePayload,
    SyncBatchPayload,
    SyncResultResponse,
    SyncStatusResponse,
    TenantPayload,
)
from .translator import (
    SyncBatchInput,
    parse_sync_batch,
    render_batch_result,
    render_sync_status,
    to_sync_batch,
)

__all__ = [
    "ClientPayload",
    "ProductPayload",
    "SaleLinePayload",
    "SalePayload",
    "SyncBatchInput",
    "SyncBatchPayload",
    "SyncResultResponse",
    "SyncStatusResponse",
    "TenantPayload",
    "parse_sync_batch",
    "render_batch_result",
    "render_sync_status",
    "to_sync_batch",
]
