from __future__ import annotations

from decimal import Decimal

import pytest

from possync.domain.reconciliation import normalize_line, split_tax_inclusive

RATE = Decimal("0.18")


@pytest.mark.parametrize("amount", ["118", "5.90", "0.01", "0", "1234567.89"])
def test_split_tax_inclusive_parts_add_up_to_amount(amount: str) -> None:
    breakdown = split_tax_inclusive(Decimal(amount), RATE)

    assert breakdown.base + breakdown.tax == Decimal(amount)
    assert breakdown.base == Decimal(amount) / (1 + RATE)
    assert breakdown.total == Decimal(amount)


def test_split_tax_inclusive_round_amount() -> None:
    breakdown = split_tax_inclusive(Decimal("118.00"), RATE)

    assert breakdown.base == Decimal("100")
    assert breakdown.tax == Decimal("18")


def test_split_tax_inclusive_zero_rate_has_no_tax() -> None:
    breakdown = split_tax_inclusive(Decimal("10.50"), Decimal(0))

    assert breakdown.base == Decimal("10.50")
    assert breakdown.tax == 0


def test_split_tax_inclusive_accepts_float_without_binary_noise() -> None:
    breakdown = split_tax_inclusive(0.1, Decimal(0))

    assert breakdown.base == Decimal("0.1")


def test_split_tax_inclusive_rejects_rate_at_or_below_minus_one() -> None:
    with pytest.raises(ValueError, match="greater than -1"):
        split_tax_inclusive(Decimal(10), Decimal(-1))


def test_normalize_line_splits_gross_amount() -> None:
    amounts = normalize_line(Decimal(2), Decimal("5.90"), RATE)

    assert amounts.gross == Decimal("11.80")
    assert amounts.base == Decimal("10")
    assert amounts.tax == Decimal("1.8")
    assert amounts.unit_value == Decimal("5")
    assert amounts.base + amounts.tax == amounts.gross


def test_normalize_line_with_fractional_quantity() -> None:
    amounts = normalize_line(Decimal("0.5"), Decimal("3.00"), RATE)

    assert amounts.gross == Decimal("1.500")
    assert amounts.base + amounts.tax == Decimal("1.5")
