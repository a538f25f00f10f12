"""Turn an offline sale record into a canonical ``Sale`` with its lines."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from logging import getLogger
from typing import TYPE_CHECKING, Final

from possync.domain.model import EntityKind, PaymentStatus, Sale, SubmissionStatus

from .contracts import UpsertOutcome
from .errors import ResolutionError
from .financials import normalize_line, split_tax_inclusive

if TYPE_CHECKING:
    from collections.abc import Callable

    from possync.config import TenantSyncConfig
    from possync.domain.ports.unit_of_work import SyncUnitOfWork

    from .contracts import IdMapping
    from .records import SaleLineRecord, SaleRecord
    from .upsert import EntityUpserter

log = getLogger(__name__)

PAYMENT_STATUS_BY_CLIENT_VALUE: Final[dict[str, PaymentStatus]] = {
    "PAGADO": PaymentStatus.COMPLETED,
    "PARCIAL": PaymentStatus.PARTIALLY_PAID,
}


def map_payment_status(value: str | None) -> PaymentStatus:
    """Map the client's payment status string exactly; anything else means pending payment."""

    if value is None:
        return PaymentStatus.PENDING_PAYMENT
    return PAYMENT_STATUS_BY_CLIENT_VALUE.get(value, PaymentStatus.PENDING_PAYMENT)


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class MaterializedSale:
    sale: Sale
    outcome: UpsertOutcome
    # problems that did not abort the sale (skipped lines, client fallback)
    line_errors: tuple[str, ...] = ()


@dataclass(slots=True)
class SaleMaterializer:
    uow: SyncUnitOfWork
    config: TenantSyncConfig
    upserter: EntityUpserter
    clock: Callable[[], datetime] = utc_now

    def materialize(
        self, tenant_id: int, record: SaleRecord, id_mapping: IdMapping
    ) -> MaterializedSale:
        sales = self.uow.repositories.sales

        if record.canonical_id is not None:
            existing = sales.get(tenant_id, record.canonical_id)
            if existing is not None:
                existing.refresh_status(
                    payment_status=map_payment_status(record.payment_status),
                    fulfillment_status=record.fulfillment_status,
                    advance=record.advance or None,
                    balance=record.balance or Decimal(0),
                    notes=record.notes,
                )
                existing.synced_at = self.clock()
                sales.update(existing)
                log.debug("Refreshed %s (id %s)", record.label, existing.id)
                return MaterializedSale(existing, UpsertOutcome.MATCHED_BY_CANONICAL_ID)
            log.debug(
                "Canonical sale id %s is unknown for tenant %s, creating %s",
                record.canonical_id,
                tenant_id,
                record.label,
            )

        problems: list[str] = []
        client_id = self._client_id(tenant_id, record, id_mapping, problems)
        header = split_tax_inclusive(record.total, self.config.tax_rate)
        sale = Sale(
            tenant_id=tenant_id,
            client_id=client_id,
            document_type=record.document_type,
            series=record.series,
            number=record.number,
            issued_at=record.issued_at,
            currency=self.config.currency,
            payment_term=self.config.payment_term,
            payment_method=record.payment_method or self.config.payment_method,
            payment_status=map_payment_status(record.payment_status),
            fulfillment_status=record.fulfillment_status,
            notes=record.notes,
            taxable_amount=header.base,
            tax_amount=header.tax,
            total=record.total,
            advance=record.advance or None,
            balance=record.balance or Decimal(0),
            submission_status=SubmissionStatus.NOT_APPLICABLE,
            synced_at=self.clock(),
        )

        for position, line in enumerate(record.lines, start=1):
            try:
                self._add_line(tenant_id, sale, line, id_mapping)
            except ResolutionError as exc:
                message = f"line {position} skipped, {exc}"
                log.warning("%s: %s", record.label, message)
                problems.append(message)

        with self.uow.savepoint():
            sales.add(sale)
        return MaterializedSale(sale, UpsertOutcome.CREATED, tuple(problems))

    def _client_id(
        self, tenant_id: int, record: SaleRecord, id_mapping: IdMapping, problems: list[str]
    ) -> int:
        if record.client_local_id is not None:
            client_id = id_mapping.lookup(EntityKind.CLIENT, record.client_local_id)
            if client_id is not None:
                return client_id
            message = (
                f"client local id {record.client_local_id} is not mapped, using the generic client"
            )
            log.warning("%s: %s", record.label, message)
            problems.append(message)
        client, _ = self.upserter.ensure_generic_client(tenant_id)
        return client.require_id()

    def _add_line(
        self, tenant_id: int, sale: Sale, line: SaleLineRecord, id_mapping: IdMapping
    ) -> None:
        product_id = id_mapping.require(EntityKind.PRODUCT, line.product_local_id)
        product = self.uow.repositories.products.get(tenant_id, product_id)
        if product is None:
            raise ResolutionError(f"product {product_id} does not exist in tenant {tenant_id}")

        amounts = normalize_line(line.quantity, line.unit_price, self.config.tax_rate)
        if line.subtotal is not None and line.subtotal != amounts.gross:
            log.warning(
                "Sale %s: client subtotal %s differs from %s x %s = %s, using the recomputed value",
                sale.document_label,
                line.subtotal,
                amounts.quantity,
                amounts.unit_price,
                amounts.gross,
            )
        sale.add_line(
            product_id=product_id,
            description=product.description,
            unit_code=product.unit_code,
            quantity=amounts.quantity,
            unit_price=amounts.unit_price,
            unit_value=amounts.unit_value,
            base_amount=amounts.base,
            tax_amount=amounts.tax,
            tax_percentage=self.config.tax_percentage,
            tax_affectation_code=product.tax_affectation_code,
        )
