"""Catalog entities: units of measure, products and clients."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar

from possync.domain.model.entity import TenantEntity
from possync.domain.model.enums import ClientRole, EntityKind, RecordStatus


@dataclass(eq=False, kw_only=True)
class UnitOfMeasure:
    """Shared (not tenant scoped) unit catalog entry, keyed by its code."""

    id: int | None = None
    code: str
    name: str


@dataclass(eq=False, kw_only=True)
class Product(TenantEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.PRODUCT

    code: str
    description: str
    unit: UnitOfMeasure | None = None
    tax_affectation_code: str
    unit_price: Decimal
    unit_value: Decimal
    tax_percentage: Decimal
    stock: int = 0
    min_stock: int = 0
    average_cost: Decimal = Decimal(0)
    status: RecordStatus = RecordStatus.ACTIVE

    @property
    def natural_key(self) -> str:
        return self.description

    @property
    def unit_code(self) -> str | None:
        return self.unit.code if self.unit is not None else None

    def reprice(self, *, description: str, unit_price: Decimal, unit_value: Decimal) -> None:
        self.description = description
        self.unit_price = unit_price
        self.unit_value = unit_value


@dataclass(eq=False, kw_only=True)
class Client(TenantEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.CLIENT

    name: str
    document_type_code: str
    document_number: str | None = None
    phone: str | None = None
    address: str | None = None
    role: ClientRole = ClientRole.CLIENT
    status: RecordStatus = RecordStatus.ACTIVE

    @property
    def natural_key(self) -> str:
        return self.name

    def update_contact(
        self, *, name: str, phone: str | None = None, address: str | None = None
    ) -> None:
        """Overwrite the name; keep phone and address when no new value is supplied."""

        self.name = name
        if phone is not None:
            self.phone = phone
        if address is not None:
            self.address = address
