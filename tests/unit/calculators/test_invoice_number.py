"""Unit tests for invoice numbering."""

import datetime as dt

import pytest

from timebill.calculators import format_invoice_number, next_invoice_sequence


class TestFormatInvoiceNumber:
    def test_format(self):
        assert format_invoice_number("INV", dt.date(2024, 3, 15), 7) == "INV-202403-0007"

    def test_sequence_beyond_four_digits(self):
        assert format_invoice_number("INV", dt.date(2024, 12, 1), 12345) == "INV-202412-12345"

    def test_sequence_must_be_positive(self):
        with pytest.raises(ValueError, match="must be positive"):
            format_invoice_number("INV", dt.date(2024, 3, 1), 0)


class TestNextInvoiceSequence:
    def test_first_of_month(self):
        assert next_invoice_sequence([], "INV", dt.date(2024, 3, 1)) == 1

    def test_uses_highest_existing(self):
        """Test that a gap in the sequence does not cause reuse."""
        existing = ["INV-202403-0001", "INV-202403-0004"]

        assert next_invoice_sequence(existing, "INV", dt.date(2024, 3, 20)) == 5

    def test_other_months_and_prefixes_ignored(self):
        existing = ["INV-202402-0009", "ACME-202403-0003", "INV-202403-0002", "INV-202403-0002-X"]

        assert next_invoice_sequence(existing, "INV", dt.date(2024, 3, 20)) == 3

    def test_prefix_with_regex_characters(self):
        assert next_invoice_sequence(["A.B-202403-0002"], "A.B", dt.date(2024, 3, 1)) == 3
        assert next_invoice_sequence(["AxB-202403-0002"], "A.B", dt.date(2024, 3, 1)) == 1
