"""Tenant-level defaults applied while reconciling offline batches."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Final

from .env import optional_env_decimal, optional_env_var
from .errors import ConfigurationError

DEFAULT_TAX_RATE: Final[Decimal] = Decimal("0.18")
DEFAULT_CURRENCY: Final[str] = "PEN"
DEFAULT_UNIT_CODE: Final[str] = "NIU"
DEFAULT_UNIT_NAME: Final[str] = "UNIDAD"
DEFAULT_TAX_AFFECTATION_CODE: Final[str] = "10"
DEFAULT_DOCUMENT_TYPE_CODE: Final[str] = "1"
GENERIC_CLIENT_DOCUMENT_NUMBER: Final[str] = "00000000"
GENERIC_CLIENT_NAME: Final[str] = "CLIENTE GENÉRICO"
DEFAULT_PAYMENT_METHOD: Final[str] = "EFECTIVO"
DEFAULT_PAYMENT_TERM: Final[str] = "CONTADO"
DEFAULT_PRODUCT_CODE_PREFIX: Final[str] = "PR"


@dataclass(frozen=True, slots=True)
class TenantSyncConfig:
    """Defaults used when canonical records are created from offline data.

    The tax rate is tenant-wide: every product and sale of a batch is normalized
    with the same rate.
    """

    tax_rate: Decimal = DEFAULT_TAX_RATE
    currency: str = DEFAULT_CURRENCY
    unit_code: str = DEFAULT_UNIT_CODE
    unit_name: str = DEFAULT_UNIT_NAME
    tax_affectation_code: str = DEFAULT_TAX_AFFECTATION_CODE
    document_type_code: str = DEFAULT_DOCUMENT_TYPE_CODE
    generic_client_document_number: str = GENERIC_CLIENT_DOCUMENT_NUMBER
    generic_client_name: str = GENERIC_CLIENT_NAME
    payment_method: str = DEFAULT_PAYMENT_METHOD
    payment_term: str = DEFAULT_PAYMENT_TERM
    product_code_prefix: str = DEFAULT_PRODUCT_CODE_PREFIX

    def __post_init__(self) -> None:
        if self.tax_rate < 0:
            raise ConfigurationError(f"Tax rate must be non-negative, got {self.tax_rate}")
        if not self.currency.strip():
            raise ConfigurationError("Currency must not be blank")

    @property
    def tax_percentage(self) -> Decimal:
        return self.tax_rate * 100


def get_tenant_sync_config() -> TenantSyncConfig:
    tax_rate = optional_env_decimal("POSSYNC_TAX_RATE")
    currency = optional_env_var("POSSYNC_CURRENCY")
    return TenantSyncConfig(
        tax_rate=DEFAULT_TAX_RATE if tax_rate is None else tax_rate,
        currency=currency or DEFAULT_CURRENCY,
    )
