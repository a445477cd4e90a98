"""Unit tests for billable hours calculations."""

import datetime as dt
from decimal import Decimal

from timebill.calculators import (
    calculate_entry_minutes,
    hours_from_minutes,
    summarize_billable_hours,
)


class TestEntryMinutes:
    def test_from_span(self):
        assert calculate_entry_minutes(dt.datetime(2024, 1, 1, 9), dt.datetime(2024, 1, 1, 10, 30), None) == 90

    def test_explicit_duration_wins(self):
        assert calculate_entry_minutes(dt.datetime(2024, 1, 1, 9), dt.datetime(2024, 1, 1, 10), 15) == 15

    def test_running_entry(self):
        assert calculate_entry_minutes(dt.datetime(2024, 1, 1, 9), None, None) is None

    def test_partial_minutes_truncated(self):
        start = dt.datetime(2024, 1, 1, 9)

        assert calculate_entry_minutes(start, start + dt.timedelta(seconds=119), None) == 1

    def test_span_across_midnight(self):
        assert calculate_entry_minutes(dt.datetime(2024, 1, 1, 23), dt.datetime(2024, 1, 2, 1), None) == 120


def test_hours_from_minutes():
    assert hours_from_minutes(50) == Decimal("0.83")


class TestSummarizeBillableHours:
    """Test billable summary aggregation."""

    def test_each_entry_priced_at_own_rate(self):
        summary = summarize_billable_hours([(90, Decimal("100")), (30, Decimal("60"))])

        assert summary.total_minutes == 120
        assert summary.total_hours == Decimal("2.00")
        assert summary.billable_amount == Decimal("180.00")
        assert summary.entry_count == 2

    def test_entries_without_duration_skipped(self):
        summary = summarize_billable_hours([(None, Decimal("100")), (0, Decimal("100")), (60, "75.5")])

        assert summary.entry_count == 1
        assert summary.billable_amount == Decimal("75.50")

    def test_empty(self):
        summary = summarize_billable_hours([])

        assert summary.total_hours == Decimal("0.00")
        assert summary.billable_amount == Decimal("0.00")
        assert summary.entry_count == 0

    def test_amount_rounded_once_at_the_end(self):
        """Test that per-entry fractions of a cent are not lost."""
        summary = summarize_billable_hours([(1, Decimal("1"))] * 3)

        assert summary.billable_amount == Decimal("0.05")
