"""SQLAlchemy mapping metadata for the possync domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from decimal import Decimal
from functools import cache
from typing import TYPE_CHECKING, Final

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from possync.domain.model import (
    Client,
    ClientRole,
    PaymentStatus,
    Product,
    RecordStatus,
    Sale,
    SaleLine,
    SubmissionStatus,
    UnitOfMeasure,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class DecimalText(TypeDecorator[Decimal]):
    """Store decimals as their exact string form; no backend float conversion."""

    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value: Decimal | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        value = Decimal(value)
        if value.is_zero():
            # a signed zero would trip the non-negative checks
            value = abs(value)
        return str(value)

    def process_result_value(self, value: str | None, dialect: Dialect) -> Decimal | None:
        _ = dialect
        if value is None:
            return None
        return Decimal(value)


def _non_negative(column: str) -> CheckConstraint:
    # decimals are stored as text; a negative value is exactly one with a leading sign
    return CheckConstraint(f"{column} NOT LIKE '-%'", name=f"{column}_non_negative")


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Catalog tables ----------------------------------------------------------------

unit_of_measure_table = Table(
    "unit_of_measure",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("code", String(10), nullable=False),
    Column("name", String, nullable=False),
    UniqueConstraint("code", name="uq_unit_of_measure_code"),
)

product_table = Table(
    "product",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", Integer, nullable=False),
    Column("code", String(20), nullable=False),
    Column("description", String, nullable=False),
    Column("unit_id", Integer, ForeignKey("unit_of_measure.id"), nullable=True),
    Column("tax_affectation_code", String(4), nullable=False),
    Column("unit_price", DecimalText, nullable=False),
    Column("unit_value", DecimalText, nullable=False),
    Column("tax_percentage", DecimalText, nullable=False),
    Column("stock", Integer, nullable=False, default=0),
    Column("min_stock", Integer, nullable=False, default=0),
    Column("average_cost", DecimalText, nullable=False),
    Column("status", Enum(RecordStatus, native_enum=False), nullable=False),
    UniqueConstraint("tenant_id", "description", name="uq_product_tenant_description"),
    _non_negative("unit_price"),
    Index("ix_product_tenant_code", "tenant_id", "code"),
)

client_table = Table(
    "client",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", Integer, nullable=False),
    Column("name", String, nullable=False),
    Column("document_type_code", String(2), nullable=False),
    Column("document_number", String(20), nullable=True),
    Column("phone", String, nullable=True),
    Column("address", String, nullable=True),
    Column("role", Enum(ClientRole, native_enum=False), nullable=False),
    Column("status", Enum(RecordStatus, native_enum=False), nullable=False),
    UniqueConstraint("tenant_id", "name", name="uq_client_tenant_name"),
    Index("ix_client_tenant_document", "tenant_id", "document_number"),
)

# Sales -------------------------------------------------------------------------

sale_table = Table(
    "sale",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", Integer, nullable=False),
    Column("client_id", Integer, ForeignKey("client.id"), nullable=False),
    Column("document_type", String(2), nullable=False),
    Column("series", String(10), nullable=False),
    Column("number", Integer, nullable=False),
    Column("issued_at", UTCDateTime, nullable=False),
    Column("currency", String(3), nullable=False),
    Column("payment_term", String(20), nullable=False),
    Column("payment_method", String(20), nullable=False),
    Column("payment_status", Enum(PaymentStatus, native_enum=False), nullable=False),
    Column("fulfillment_status", String(30), nullable=True),
    Column("notes", String, nullable=True),
    Column("taxable_amount", DecimalText, nullable=False),
    Column("tax_amount", DecimalText, nullable=False),
    Column("total", DecimalText, nullable=False),
    Column("advance", DecimalText, nullable=True),
    Column("balance", DecimalText, nullable=False),
    Column("submission_status", Enum(SubmissionStatus, native_enum=False), nullable=False),
    Column("synced_at", UTCDateTime, nullable=True),
    _non_negative("total"),
    Index("ix_sale_tenant_submission", "tenant_id", "submission_status"),
)

sale_line_table = Table(
    "sale_line",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("sale_id", Integer, ForeignKey("sale.id", ondelete="CASCADE"), nullable=False),
    Column("position", Integer, nullable=False),
    Column("product_id", Integer, ForeignKey("product.id"), nullable=False),
    Column("description", String, nullable=False),
    Column("unit_code", String(10), nullable=True),
    Column("quantity", DecimalText, nullable=False),
    Column("unit_price", DecimalText, nullable=False),
    Column("unit_value", DecimalText, nullable=False),
    Column("base_amount", DecimalText, nullable=False),
    Column("tax_amount", DecimalText, nullable=False),
    Column("tax_percentage", DecimalText, nullable=False),
    Column("tax_affectation_code", String(4), nullable=False),
    _non_negative("quantity"),
)

TABLE_BY_CLASS: Final[dict[type[object], Table]] = {
    UnitOfMeasure: unit_of_measure_table,
    Product: product_table,
    Client: client_table,
    Sale: sale_table,
    SaleLine: sale_line_table,
}


@cache
def start_mappers() -> orm.registry:
    """Map the domain dataclasses onto the tables; safe to call repeatedly."""

    mapper_registry.map_imperatively(UnitOfMeasure, unit_of_measure_table)

    mapper_registry.map_imperatively(
        Product,
        product_table,
        properties={
            "unit": relationship(UnitOfMeasure, lazy="joined"),
        },
    )

    mapper_registry.map_imperatively(Client, client_table)

    mapper_registry.map_imperatively(
        Sale,
        sale_table,
        properties={
            "lines": relationship(
                SaleLine,
                cascade="all, delete-orphan",
                order_by=sale_line_table.c.position,
            ),
        },
    )

    mapper_registry.map_imperatively(SaleLine, sale_line_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
