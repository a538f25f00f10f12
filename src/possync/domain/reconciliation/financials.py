"""Tax normalization of tax-inclusive amounts under a fixed rate.

``base = amount / (1 + rate)`` and ``tax = amount - base``. No rounding is
applied beyond the decimal context precision, so ``base + tax == amount``.
Header totals and line totals are normalized independently; their sums are
allowed to differ by rounding residue.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class TaxBreakdown:
    base: Decimal
    tax: Decimal

    @property
    def total(self) -> Decimal:
        return self.base + self.tax


@dataclass(frozen=True, slots=True)
class LineAmounts:
    """Normalized amounts of one sale line."""

    quantity: Decimal
    unit_price: Decimal
    unit_value: Decimal
    gross: Decimal
    base: Decimal
    tax: Decimal


def as_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # go through repr so 0.1 stays 0.1 instead of its binary expansion
        return Decimal(repr(value))
    return Decimal(value)


def split_tax_inclusive(amount: Decimal | int | float | str, rate: Decimal) -> TaxBreakdown:
    """Split a tax-inclusive ``amount`` into its base and tax parts."""

    if rate <= -1:
        raise ValueError(f"Tax rate must be greater than -1, got {rate}")
    total = as_decimal(amount)
    base = total / (1 + rate)
    return TaxBreakdown(base=base, tax=total - base)


def normalize_line(
    quantity: Decimal | int | float | str,
    unit_price: Decimal | int | float | str,
    rate: Decimal,
) -> LineAmounts:
    """Normalize ``quantity × unit_price`` as one tax-inclusive amount."""

    qty = as_decimal(quantity)
    price = as_decimal(unit_price)
    gross = qty * price
    line = split_tax_inclusive(gross, rate)
    return LineAmounts(
        quantity=qty,
        unit_price=price,
        unit_value=split_tax_inclusive(price, rate).base,
        gross=gross,
        base=line.base,
        tax=line.tax,
    )
