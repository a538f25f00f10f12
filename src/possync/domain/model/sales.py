"""Sale documents. ``Sale`` is the aggregate root and owns its lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar

from possync.domain.model.entity import TenantEntity
from possync.domain.model.enums import EntityKind, PaymentStatus, SubmissionStatus

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class SaleLine:
    """One priced line of a sale; description and unit are frozen at creation."""

    id: int | None = None
    position: int
    product_id: int
    description: str
    unit_code: str | None
    quantity: Decimal
    unit_price: Decimal
    unit_value: Decimal
    base_amount: Decimal
    tax_amount: Decimal
    tax_percentage: Decimal
    tax_affectation_code: str

    @property
    def total(self) -> Decimal:
        return self.base_amount + self.tax_amount


@dataclass(eq=False, kw_only=True)
class Sale(TenantEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.SALE

    client_id: int
    document_type: str
    series: str
    number: int
    issued_at: datetime
    currency: str
    payment_term: str
    payment_method: str
    payment_status: PaymentStatus = PaymentStatus.PENDING_PAYMENT
    fulfillment_status: str | None = None
    notes: str | None = None
    taxable_amount: Decimal
    tax_amount: Decimal
    total: Decimal
    advance: Decimal | None = None
    balance: Decimal = Decimal(0)
    submission_status: SubmissionStatus = SubmissionStatus.PENDING
    synced_at: datetime | None = None

    lines: list[SaleLine] = field(default_factory=list["SaleLine"])

    @property
    def document_label(self) -> str:
        return f"{self.series}-{self.number}"

    @property
    def is_offline(self) -> bool:
        return self.submission_status is SubmissionStatus.NOT_APPLICABLE

    def add_line(
        self,
        *,
        product_id: int,
        description: str,
        unit_code: str | None,
        quantity: Decimal,
        unit_price: Decimal,
        unit_value: Decimal,
        base_amount: Decimal,
        tax_amount: Decimal,
        tax_percentage: Decimal,
        tax_affectation_code: str,
    ) -> SaleLine:
        line = SaleLine(
            position=len(self.lines) + 1,
            product_id=product_id,
            description=description,
            unit_code=unit_code,
            quantity=quantity,
            unit_price=unit_price,
            unit_value=unit_value,
            base_amount=base_amount,
            tax_amount=tax_amount,
            tax_percentage=tax_percentage,
            tax_affectation_code=tax_affectation_code,
        )
        self.lines.append(line)
        return line

    def refresh_status(
        self,
        *,
        payment_status: PaymentStatus,
        fulfillment_status: str | None,
        advance: Decimal | None,
        balance: Decimal,
        notes: str | None,
    ) -> None:
        self.payment_status = payment_status
        self.fulfillment_status = fulfillment_status
        self.advance = advance
        self.balance = balance
        self.notes = notes
