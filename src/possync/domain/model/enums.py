"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Discriminator for the entity kinds carried by an offline batch."""

    PRODUCT = "product"
    CLIENT = "client"
    SALE = "sale"


class RecordStatus(StrEnum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class PaymentStatus(StrEnum):
    PENDING_PAYMENT = "PENDING_PAYMENT"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    COMPLETED = "COMPLETED"
    VOIDED = "VOIDED"


class SubmissionStatus(StrEnum):
    """State of a sale with respect to formal tax submission."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    # offline sales are never submitted; this doubles as the "synced" marker
    NOT_APPLICABLE = "NOT_APPLICABLE"


class ClientRole(StrEnum):
    CLIENT = "CLIENT"
    SUPPLIER = "SUPPLIER"
