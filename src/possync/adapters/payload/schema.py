"""Pydantic models describing the POS client's sync payloads."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from decimal import Decimal  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class PayloadBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# Request -----------------------------------------------------------------------


class TenantPayload(PayloadBaseModel):
    tax_id: str | None = Field(default=None, alias="ruc")
    trade_name: str = Field(alias="nombreComercial")
    phone: str | None = Field(default=None, alias="telefono")

    _normalize_optional = field_validator("tax_id", "phone", mode="before")(_blank_to_none)


class ProductPayload(PayloadBaseModel):
    local_id: int = Field(alias="localId")
    remote_id: int | None = Field(default=None, alias="remoteId")
    name: str = Field(alias="nombre", min_length=1)
    price: Decimal = Field(alias="precio")
    stock: int = 0


class ClientPayload(PayloadBaseModel):
    local_id: int = Field(alias="localId")
    remote_id: int | None = Field(default=None, alias="remoteId")
    name: str = Field(alias="nombre", min_length=1)
    phone: str | None = Field(default=None, alias="telefono")
    note: str | None = Field(default=None, alias="nota")

    _normalize_optional = field_validator("phone", "note", mode="before")(_blank_to_none)


class SaleLinePayload(PayloadBaseModel):
    local_id: int | None = Field(default=None, alias="localId")
    product_local_id: int = Field(alias="productoLocalId")
    quantity: Decimal = Field(alias="cantidad")
    unit_price: Decimal = Field(alias="precioUnitario")
    subtotal: Decimal | None = None


class SalePayload(PayloadBaseModel):
    local_id: int = Field(alias="localId")
    remote_id: int | None = Field(default=None, alias="remoteId")
    issued_at: datetime = Field(alias="fecha")
    total: Decimal
    client_local_id: int | None = Field(default=None, alias="clienteLocalId")
    document_type: str = Field(alias="tipoDoc", min_length=1)
    series: str = Field(alias="serie", min_length=1)
    number: int = Field(alias="correlativo")
    payment_status: str | None = Field(default=None, alias="estadoPago")
    fulfillment_status: str | None = Field(default=None, alias="estadoOT")
    advance: Decimal | None = Field(default=None, alias="adelanto")
    balance: Decimal | None = Field(default=None, alias="saldo")
    notes: str | None = Field(default=None, alias="observaciones")
    payment_method: str | None = Field(default=None, alias="medioPago")
    lines: list[SaleLinePayload] = Field(default_factory=list, alias="detalles")

    _normalize_optional = field_validator(
        "payment_status", "fulfillment_status", "notes", "payment_method", mode="before"
    )(_blank_to_none)


class SyncBatchPayload(PayloadBaseModel):
    version: str = Field(min_length=1)
    timestamp: datetime
    tenant: TenantPayload = Field(alias="empresa")
    products: list[ProductPayload] = Field(default_factory=list, alias="productos")
    clients: list[ClientPayload] = Field(default_factory=list, alias="clientes")
    sales: list[SalePayload] = Field(default_factory=list, alias="ventas")


# Response ----------------------------------------------------------------------


class KindSummaryPayload(PayloadBaseModel):
    created: int = Field(serialization_alias="creados")
    matched_by_canonical_id: int = Field(serialization_alias="coincidenciasPorId")
    matched_by_natural_key: int = Field(serialization_alias="coincidenciasPorClave")
    failed: int = Field(serialization_alias="fallidos")


class IdMappingsPayload(PayloadBaseModel):
    products: dict[int, int] = Field(serialization_alias="productos")
    clients: dict[int, int] = Field(serialization_alias="clientes")
    sales: dict[int, int] = Field(serialization_alias="ventas")


class SyncResultData(PayloadBaseModel):
    products_synced: int = Field(serialization_alias="productosCreados")
    clients_synced: int = Field(serialization_alias="clientesCreados")
    sales_synced: int = Field(serialization_alias="ventasCreadas")
    mappings: IdMappingsPayload
    summary: dict[str, KindSummaryPayload] = Field(serialization_alias="resumen")


class SyncResultResponse(PayloadBaseModel):
    success: bool
    message: str
    data: SyncResultData
    # omitted from the JSON when the batch had no record errors
    errors: list[str] | None = None


class SyncStatusResponse(PayloadBaseModel):
    last_sync: datetime | None = Field(serialization_alias="lastSync")
    synced_sales: int = Field(serialization_alias="ventasSincronizadas")
