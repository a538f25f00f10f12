"""Offline batch reconciliation.

Flow of one batch:
1) validate the batch envelope
2) upsert products, recording local -> canonical ids
3) upsert clients, recording local -> canonical ids
4) materialize sales with normalized amounts, skipping unresolvable lines
5) fold the per-record results into a ``BatchResult``
"""

from __future__ import annotations

from .contracts import (
    BatchResult,
    IdMapping,
    KindSummary,
    NaturalKey,
    RecordFailure,
    RecordResult,
    RecordSuccess,
    UpsertOutcome,
)
from .engine import BatchPhase, ReconciliationEngine
from .errors import (
    BatchShapeError,
    ConstraintViolationError,
    NotFoundError,
    PersistenceError,
    ResolutionError,
    SyncError,
)
from .financials import LineAmounts, TaxBreakdown, normalize_line, split_tax_inclusive
from .materialize import MaterializedSale, SaleMaterializer, map_payment_status
from .records import (
    ClientRecord,
    ProductRecord,
    SaleLineRecord,
    SaleRecord,
    SyncBatch,
    TenantHint,
    validate_batch,
)
from .resolve import NaturalKeyResolver, client_key, document_key, product_key
from .status import SyncStatus, get_sync_status
from .upsert import EntityUpserter

__all__ = [
    "BatchPhase",
    "BatchResult",
    "BatchShapeError",
    "ClientRecord",
    "ConstraintViolationError",
    "EntityUpserter",
    "IdMapping",
    "KindSummary",
    "LineAmounts",
    "MaterializedSale",
    "NaturalKey",
    "NaturalKeyResolver",
    "NotFoundError",
    "PersistenceError",
    "ProductRecord",
    "RecordFailure",
    "RecordResult",
    "RecordSuccess",
    "ReconciliationEngine",
    "ResolutionError",
    "SaleLineRecord",
    "SaleMaterializer",
    "SaleRecord",
    "SyncBatch",
    "SyncError",
    "SyncStatus",
    "TaxBreakdown",
    "TenantHint",
    "UpsertOutcome",
    "client_key",
    "document_key",
    "get_sync_status",
    "map_payment_status",
    "normalize_line",
    "product_key",
    "split_tax_inclusive",
    "validate_batch",
]
