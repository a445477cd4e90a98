"""Calculator modules for invoice and billable-hours arithmetic."""

from timebill.calculators.hours_calculator import (
    BillableSummary,
    calculate_entry_minutes,
    hours_from_minutes,
    summarize_billable_hours,
)
from timebill.calculators.invoice_calculator import (
    InvoiceTotals,
    calculate_invoice_totals,
    calculate_line_amount,
    calculate_tax,
)
from timebill.calculators.invoice_number import (
    format_invoice_number,
    next_invoice_sequence,
)
from timebill.calculators.time_utils import (
    day_after,
    start_of_day,
    to_naive_utc,
    utc_now,
    utc_today,
)

__all__ = [
    # hours_calculator
    "BillableSummary",
    "calculate_entry_minutes",
    "hours_from_minutes",
    "summarize_billable_hours",
    # invoice_calculator
    "InvoiceTotals",
    "calculate_invoice_totals",
    "calculate_line_amount",
    "calculate_tax",
    # invoice_number
    "format_invoice_number",
    "next_invoice_sequence",
    # time_utils
    "day_after",
    "start_of_day",
    "to_naive_utc",
    "utc_now",
    "utc_today",
]
