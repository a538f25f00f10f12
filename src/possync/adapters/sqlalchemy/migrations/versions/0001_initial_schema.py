"""Initial schema: units of measure, products, clients, sales and sale lines.

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from possync.adapters.sqlalchemy.mappings import DecimalText, UTCDateTime

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

RECORD_STATUS = sa.Enum("ACTIVE", "INACTIVE", name="recordstatus", native_enum=False)
CLIENT_ROLE = sa.Enum("CLIENT", "SUPPLIER", name="clientrole", native_enum=False)
PAYMENT_STATUS = sa.Enum(
    "PENDING_PAYMENT",
    "PARTIALLY_PAID",
    "COMPLETED",
    "VOIDED",
    name="paymentstatus",
    native_enum=False,
)
SUBMISSION_STATUS = sa.Enum(
    "PENDING",
    "ACCEPTED",
    "REJECTED",
    "NOT_APPLICABLE",
    name="submissionstatus",
    native_enum=False,
)


def upgrade() -> None:
    op.create_table(
        "unit_of_measure",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("code", sa.String(length=10), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_unit_of_measure")),
        sa.UniqueConstraint("code", name="uq_unit_of_measure_code"),
    )
    op.create_table(
        "product",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("unit_id", sa.Integer(), nullable=True),
        sa.Column("tax_affectation_code", sa.String(length=4), nullable=False),
        sa.Column("unit_price", DecimalText(), nullable=False),
        sa.Column("unit_value", DecimalText(), nullable=False),
        sa.Column("tax_percentage", DecimalText(), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("min_stock", sa.Integer(), nullable=False),
        sa.Column("average_cost", DecimalText(), nullable=False),
        sa.Column("status", RECORD_STATUS, nullable=False),
        sa.CheckConstraint(
            "unit_price NOT LIKE '-%'", name=op.f("ck_product_unit_price_non_negative")
        ),
        sa.ForeignKeyConstraint(
            ["unit_id"],
            ["unit_of_measure.id"],
            name=op.f("fk_product_product_unit_id_unit_of_measure"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_product")),
        sa.UniqueConstraint("tenant_id", "description", name="uq_product_tenant_description"),
    )
    op.create_index("ix_product_tenant_code", "product", ["tenant_id", "code"])
    op.create_table(
        "client",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("document_type_code", sa.String(length=2), nullable=False),
        sa.Column("document_number", sa.String(length=20), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("role", CLIENT_ROLE, nullable=False),
        sa.Column("status", RECORD_STATUS, nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_client")),
        sa.UniqueConstraint("tenant_id", "name", name="uq_client_tenant_name"),
    )
    op.create_index("ix_client_tenant_document", "client", ["tenant_id", "document_number"])
    op.create_table(
        "sale",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("client_id", sa.Integer(), nullable=False),
        sa.Column("document_type", sa.String(length=2), nullable=False),
        sa.Column("series", sa.String(length=10), nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("issued_at", UTCDateTime(), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("payment_term", sa.String(length=20), nullable=False),
        sa.Column("payment_method", sa.String(length=20), nullable=False),
        sa.Column("payment_status", PAYMENT_STATUS, nullable=False),
        sa.Column("fulfillment_status", sa.String(length=30), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("taxable_amount", DecimalText(), nullable=False),
        sa.Column("tax_amount", DecimalText(), nullable=False),
        sa.Column("total", DecimalText(), nullable=False),
        sa.Column("advance", DecimalText(), nullable=True),
        sa.Column("balance", DecimalText(), nullable=False),
        sa.Column("submission_status", SUBMISSION_STATUS, nullable=False),
        sa.Column("synced_at", UTCDateTime(), nullable=True),
        sa.CheckConstraint("total NOT LIKE '-%'", name=op.f("ck_sale_total_non_negative")),
        sa.ForeignKeyConstraint(
            ["client_id"], ["client.id"], name=op.f("fk_sale_sale_client_id_client")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_sale")),
    )
    op.create_index("ix_sale_tenant_submission", "sale", ["tenant_id", "submission_status"])
    op.create_table(
        "sale_line",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("sale_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("unit_code", sa.String(length=10), nullable=True),
        sa.Column("quantity", DecimalText(), nullable=False),
        sa.Column("unit_price", DecimalText(), nullable=False),
        sa.Column("unit_value", DecimalText(), nullable=False),
        sa.Column("base_amount", DecimalText(), nullable=False),
        sa.Column("tax_amount", DecimalText(), nullable=False),
        sa.Column("tax_percentage", DecimalText(), nullable=False),
        sa.Column("tax_affectation_code", sa.String(length=4), nullable=False),
        sa.CheckConstraint(
            "quantity NOT LIKE '-%'", name=op.f("ck_sale_line_quantity_non_negative")
        ),
        sa.ForeignKeyConstraint(
            ["sale_id"],
            ["sale.id"],
            name=op.f("fk_sale_line_sale_line_sale_id_sale"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["product.id"],
            name=op.f("fk_sale_line_sale_line_product_id_product"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_sale_line")),
    )


def downgrade() -> None:
    op.drop_table("sale_line")
    op.drop_index("ix_sale_tenant_submission", table_name="sale")
    op.drop_table("sale")
    op.drop_index("ix_client_tenant_document", table_name="client")
    op.drop_table("client")
    op.drop_index("ix_product_tenant_code", table_name="product")
    op.drop_table("product")
    op.drop_table("unit_of_measure")
