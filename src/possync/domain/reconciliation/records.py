"""Input records of an offline batch, as submitted by a disconnected client.

Records carry client-local identifiers only; canonical ids appear as hints when
the client already learned them from an earlier sync.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import BatchShapeError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime
    from decimal import Decimal


@dataclass(frozen=True, slots=True, kw_only=True)
class TenantHint:
    """Business identity the client believes it belongs to (informational)."""

    trade_name: str
    tax_id: str | None = None
    phone: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProductRecord:
    local_id: int
    name: str
    price: Decimal
    stock: int
    canonical_id: int | None = None

    @property
    def label(self) -> str:
        return f"Product {self.name}"


@dataclass(frozen=True, slots=True, kw_only=True)
class ClientRecord:
    local_id: int
    name: str
    phone: str | None = None
    note: str | None = None
    canonical_id: int | None = None

    @property
    def label(self) -> str:
        return f"Client {self.name}"


@dataclass(frozen=True, slots=True, kw_only=True)
class SaleLineRecord:
    product_local_id: int
    quantity: Decimal
    unit_price: Decimal
    # advisory only, recomputed from quantity and unit price
    subtotal: Decimal | None = None
    local_id: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SaleRecord:
    local_id: int
    issued_at: datetime
    total: Decimal
    document_type: str
    series: str
    number: int
    client_local_id: int | None = None
    payment_status: str | None = None
    fulfillment_status: str | None = None
    advance: Decimal | None = None
    balance: Decimal | None = None
    notes: str | None = None
    payment_method: str | None = None
    lines: tuple[SaleLineRecord, ...] = ()
    canonical_id: int | None = None

    @property
    def label(self) -> str:
        return f"Sale {self.series}-{self.number}"


@dataclass(frozen=True, slots=True, kw_only=True)
class SyncBatch:
    """Envelope of one offline upload, consumed exactly once per call."""

    version: str
    timestamp: datetime
    tenant: TenantHint
    products: tuple[ProductRecord, ...] = ()
    clients: tuple[ClientRecord, ...] = ()
    sales: tuple[SaleRecord, ...] = ()

    @property
    def record_count(self) -> int:
        return len(self.products) + len(self.clients) + len(self.sales)


def validate_batch(batch: SyncBatch) -> SyncBatch:
    """Check the batch invariants and return it unchanged.

    Raises ``BatchShapeError`` listing every problem found, before any record is
    processed.
    """

    problems: list[str] = []
    if not batch.version.strip():
        problems.append("version must not be blank")
    if not batch.tenant.trade_name.strip():
        problems.append("tenant trade name must not be blank")
    problems.extend(_duplicate_local_ids("product", (p.local_id for p in batch.products)))
    problems.extend(_duplicate_local_ids("client", (c.local_id for c in batch.clients)))
    problems.extend(_duplicate_local_ids("sale", (s.local_id for s in batch.sales)))
    for record in batch.products:
        if not record.name.strip():
            problems.append(f"product {record.local_id} has a blank name")
    for record in batch.clients:
        if not record.name.strip():
            problems.append(f"client {record.local_id} has a blank name")
    for record in batch.sales:
        if not record.series.strip():
            problems.append(f"sale {record.local_id} has a blank series")

    if problems:
        raise BatchShapeError("Malformed sync batch", problems=problems)
    return batch


def _duplicate_local_ids(kind: str, local_ids: Iterable[int]) -> list[str]:
    counts = Counter(local_ids)
    return [
        f"duplicate {kind} local id {local_id}"
        for local_id, count in sorted(counts.items())
        if count > 1
    ]
