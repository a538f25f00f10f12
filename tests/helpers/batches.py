"""Builders for offline batches and their wire payloads."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from possync.domain.reconciliation import (
    ClientRecord,
    ProductRecord,
    SaleLineRecord,
    SaleRecord,
    SyncBatch,
    TenantHint,
)

BATCH_TIME = datetime(2025, 3, 14, 18, 30, tzinfo=UTC)
SYNC_TIME = datetime(2025, 3, 15, 9, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return SYNC_TIME


def make_product(
    local_id: int = 1,
    name: str = "Agua San Luis 625ml",
    *,
    price: str = "2.36",
    stock: int = 24,
    canonical_id: int | None = None,
) -> ProductRecord:
    return ProductRecord(
        local_id=local_id,
        name=name,
        price=Decimal(price),
        stock=stock,
        canonical_id=canonical_id,
    )


def make_client(
    local_id: int = 1,
    name: str = "Rosa Quispe",
    *,
    phone: str | None = "987654321",
    note: str | None = None,
    canonical_id: int | None = None,
) -> ClientRecord:
    return ClientRecord(
        local_id=local_id,
        name=name,
        phone=phone,
        note=note,
        canonical_id=canonical_id,
    )


def make_line(
    product_local_id: int = 1,
    *,
    quantity: str = "1",
    unit_price: str = "2.36",
    subtotal: str | None = None,
) -> SaleLineRecord:
    return SaleLineRecord(
        product_local_id=product_local_id,
        quantity=Decimal(quantity),
        unit_price=Decimal(unit_price),
        subtotal=Decimal(subtotal) if subtotal is not None else None,
    )


def make_sale(
    local_id: int = 1,
    *,
    lines: tuple[SaleLineRecord, ...] = (),
    total: str | None = None,
    client_local_id: int | None = None,
    series: str = "B001",
    number: int | None = None,
    payment_status: str | None = "PAGADO",
    canonical_id: int | None = None,
    advance: str | None = None,
    balance: str | None = None,
) -> SaleRecord:
    computed_total = sum((line.quantity * line.unit_price for line in lines), Decimal(0))
    return SaleRecord(
        local_id=local_id,
        canonical_id=canonical_id,
        issued_at=BATCH_TIME,
        total=Decimal(total) if total is not None else computed_total,
        client_local_id=client_local_id,
        document_type="03",
        series=series,
        number=number if number is not None else local_id,
        payment_status=payment_status,
        advance=Decimal(advance) if advance is not None else None,
        balance=Decimal(balance) if balance is not None else None,
        lines=lines,
    )


def make_batch(
    *,
    products: tuple[ProductRecord, ...] = (),
    clients: tuple[ClientRecord, ...] = (),
    sales: tuple[SaleRecord, ...] = (),
) -> SyncBatch:
    return SyncBatch(
        version="1.0",
        timestamp=BATCH_TIME,
        tenant=TenantHint(trade_name="Bodega Don Lucho", tax_id="20123456789"),
        products=products,
        clients=clients,
        sales=sales,
    )


def make_payload() -> dict[str, Any]:
    """A complete upload as the POS client sends it."""

    return {
        "version": "1.0",
        "timestamp": "2025-03-14T18:30:00Z",
        "empresa": {
            "ruc": "20123456789",
            "nombreComercial": "Bodega Don Lucho",
            "telefono": "",
        },
        "productos": [
            {"localId": 1, "nombre": "Agua San Luis 625ml", "precio": 2.36, "stock": 24},
            {"localId": 2, "nombre": "Galleta Soda Field", "precio": 1.18, "stock": 50},
        ],
        "clientes": [
            {
                "localId": 1,
                "nombre": "Rosa Quispe",
                "telefono": "987654321",
                "nota": "Jr. Lima 123",
            },
        ],
        "ventas": [
            {
                "localId": 1,
                "fecha": "2025-03-14T17:05:00Z",
                "total": 5.90,
                "clienteLocalId": 1,
                "tipoDoc": "03",
                "serie": "B001",
                "correlativo": 15,
                "estadoPago": "PAGADO",
                "medioPago": "YAPE",
                "detalles": [
                    {
                        "localId": 1,
                        "productoLocalId": 1,
                        "cantidad": 2,
                        "precioUnitario": 2.36,
                        "subtotal": 4.72,
                    },
                    {
                        "localId": 2,
                        "productoLocalId": 2,
                        "cantidad": 1,
                        "precioUnitario": 1.18,
                        "subtotal": 1.18,
                    },
                ],
            },
            {
                "localId": 2,
                "fecha": "2025-03-14T17:40:00Z",
                "total": 1.18,
                "tipoDoc": "03",
                "serie": "B001",
                "correlativo": 16,
                "estadoPago": "PENDIENTE",
                "detalles": [
                    {"productoLocalId": 2, "cantidad": 1, "precioUnitario": 1.18},
                ],
            },
        ],
    }
