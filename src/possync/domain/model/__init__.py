"""Public domain model surface."""

from __future__ import annotations

from possync.domain.model.catalog import Client, Product, UnitOfMeasure
from possync.domain.model.entity import Entity, TenantEntity
from possync.domain.model.enums import (
    ClientRole,
    EntityKind,
    PaymentStatus,
    RecordStatus,
    SubmissionStatus,
)
from possync.domain.model.sales import Sale, SaleLine

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "TenantEntity",
    # catalog
    "UnitOfMeasure",
    "Product",
    "Client",
    # sales
    "Sale",
    "SaleLine",
    # enums
    "ClientRole",
    "EntityKind",
    "PaymentStatus",
    "RecordStatus",
    "SubmissionStatus",
]
