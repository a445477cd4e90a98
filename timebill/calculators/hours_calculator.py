"""Billable hours calculations for time entries."""

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from timebill.calculators.invoice_calculator import Number, quantize_money, to_decimal
from timebill.calculators.time_utils import minutes_between

MINUTES_PER_HOUR = Decimal("60")


@dataclass
class BillableSummary:
    """Billable hours and amount over a set of time entries.

    Attributes:
        total_minutes: Sum of entry durations
        total_hours: total_minutes / 60, rounded to 2 decimals
        billable_amount: Sum of (minutes / 60 x project hourly rate), in cents
        entry_count: Number of entries that contributed
    """

    total_minutes: int
    total_hours: Decimal
    billable_amount: Decimal
    entry_count: int


def calculate_entry_minutes(
    start_time: dt.datetime,
    end_time: Optional[dt.datetime],
    duration_minutes: Optional[int],
) -> Optional[int]:
    """Determine how many minutes a time entry covers.

    An explicit duration wins over the start/end span; an entry that is
    still running (no end, no duration) has no duration yet.

    Example:
        >>> calculate_entry_minutes(dt.datetime(2024, 1, 1, 9), dt.datetime(2024, 1, 1, 10, 30), None)
        90
    """
    if duration_minutes is not None:
        return duration_minutes
    if end_time is None:
        return None
    return minutes_between(start_time, end_time)


def hours_from_minutes(minutes: int) -> Decimal:
    return quantize_money(Decimal(minutes) / MINUTES_PER_HOUR)


def summarize_billable_hours(rows: Iterable[Tuple[Optional[int], Number]]) -> BillableSummary:
    """Summarize billable time over (duration_minutes, hourly_rate) rows.

    Every entry is priced at the hourly rate of its own project. Entries
    without a duration contribute nothing.

    Example:
        >>> summary = summarize_billable_hours([(90, Decimal("100")), (30, Decimal("60"))])
        >>> (summary.total_hours, summary.billable_amount)
        (Decimal('2.00'), Decimal('180.00'))
    """
    total_minutes = 0
    amount = Decimal("0")
    count = 0

    for minutes, rate in rows:
        if not minutes:
            continue
        total_minutes += minutes
        amount += Decimal(minutes) / MINUTES_PER_HOUR * to_decimal(rate)
        count += 1

    return BillableSummary(
        total_minutes=total_minutes,
        total_hours=hours_from_minutes(total_minutes),
        billable_amount=quantize_money(amount),
        entry_count=count,
    )
