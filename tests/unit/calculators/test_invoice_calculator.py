"""Unit tests for invoice amount calculations."""

from decimal import Decimal

import pytest

from timebill.calculators import (
    calculate_invoice_totals,
    calculate_line_amount,
    calculate_tax,
)
from timebill.calculators.invoice_calculator import quantize_money, to_decimal


class TestToDecimal:
    def test_float_without_artefacts(self):
        """Test that floats go through str() first."""
        assert to_decimal(0.1) == Decimal("0.1")

    def test_decimal_passthrough(self):
        value = Decimal("12.5")

        assert to_decimal(value) is value

    def test_invalid_value(self):
        with pytest.raises(ValueError, match="Cannot convert"):
            to_decimal("twelve")


class TestRounding:
    @pytest.mark.parametrize(
        "value,expected",
        [("2.345", "2.35"), ("2.344", "2.34"), ("-1.005", "-1.01"), ("10", "10.00")],
    )
    def test_half_up(self, value, expected):
        assert quantize_money(Decimal(value)) == Decimal(expected)


class TestLineAmount:
    def test_hours_times_rate(self):
        assert calculate_line_amount(Decimal("7.5"), Decimal("85.00")) == Decimal("637.50")

    def test_rounds_to_cents(self):
        assert calculate_line_amount("1.333", "10") == Decimal("13.33")


class TestTax:
    def test_percentage(self):
        assert calculate_tax(Decimal("920"), Decimal("10")) == Decimal("92.00")

    def test_zero_rate(self):
        assert calculate_tax(Decimal("920"), 0) == Decimal("0.00")

    @pytest.mark.parametrize("rate", ["-1", "100.01"])
    def test_rate_out_of_range(self, rate):
        with pytest.raises(ValueError, match="Tax rate must be between 0 and 100"):
            calculate_tax(Decimal("100"), rate)


class TestInvoiceTotals:
    """Test the full invoice calculation."""

    def test_two_lines_with_tax(self):
        totals = calculate_invoice_totals(
            [(Decimal("8"), Decimal("100")), (Decimal("1.5"), Decimal("80"))], Decimal("10")
        )

        assert totals.line_amounts == [Decimal("800.00"), Decimal("120.00")]
        assert totals.subtotal == Decimal("920.00")
        assert totals.tax_amount == Decimal("92.00")
        assert totals.total == Decimal("1012.00")
        assert totals.tax_rate == Decimal("10.00")

    def test_total_is_subtotal_plus_tax(self):
        """Test the stored amounts always add up after rounding."""
        totals = calculate_invoice_totals(
            [("0.333", "33.33"), ("2.25", "19.99"), ("1", "0.01")], "7.7"
        )

        assert totals.subtotal == sum(totals.line_amounts)
        assert totals.total == totals.subtotal + totals.tax_amount

    def test_no_lines(self):
        totals = calculate_invoice_totals([], 19)

        assert totals.subtotal == Decimal("0.00")
        assert totals.total == Decimal("0.00")
