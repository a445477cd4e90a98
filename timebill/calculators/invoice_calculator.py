"""Invoice amount calculations.

This module implements the arithmetic behind invoice generation:
- Line amounts (quantity in hours x unit price)
- Subtotal across all lines
- Tax from a percentage rate
- Grand total (subtotal + tax)

All money values are Decimals quantized to cents with ROUND_HALF_UP, so the
stored invoice always satisfies ``total == subtotal + tax_amount`` and
``subtotal == sum(line amounts)``.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Tuple, Union

CENTS = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert a numeric value to Decimal without float artefacts.

    Raises:
        ValueError: If the value cannot be converted to Decimal
    """
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (ArithmeticError, ValueError, TypeError) as e:
        raise ValueError(f"Cannot convert {value!r} to Decimal: {e}")


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass
class InvoiceTotals:
    """Computed amounts for an invoice.

    Attributes:
        subtotal: Sum of all line amounts
        tax_rate: Tax rate in percent (0-100)
        tax_amount: subtotal x tax_rate / 100
        total: subtotal + tax_amount
        line_amounts: Amount of each line, in input order

    Example:
        >>> totals = calculate_invoice_totals([(Decimal("10"), Decimal("85"))], Decimal("19"))
        >>> totals.total
        Decimal('1011.50')
    """

    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal
    line_amounts: List[Decimal] = field(default_factory=list)


def calculate_line_amount(quantity: Number, rate: Number) -> Decimal:
    """Calculate the amount of a single invoice line.

    Args:
        quantity: Billed hours
        rate: Unit price per hour

    Returns:
        quantity x rate, rounded to cents

    Example:
        >>> calculate_line_amount(Decimal("7.5"), Decimal("85.00"))
        Decimal('637.50')
    """
    return quantize_money(to_decimal(quantity) * to_decimal(rate))


def calculate_tax(subtotal: Number, tax_rate: Number) -> Decimal:
    """Calculate tax for a subtotal at a percentage rate.

    Raises:
        ValueError: If the rate is outside 0-100
    """
    rate = to_decimal(tax_rate)
    if rate < 0 or rate > 100:
        raise ValueError(f"Tax rate must be between 0 and 100, got {rate}")
    return quantize_money(to_decimal(subtotal) * rate / Decimal("100"))


def calculate_invoice_totals(
    lines: Iterable[Tuple[Number, Number]], tax_rate: Number
) -> InvoiceTotals:
    """Calculate subtotal, tax and total for a set of invoice lines.

    Each line amount is rounded to cents before summing, which keeps the
    stored line amounts and the stored subtotal consistent.

    Args:
        lines: (quantity, unit_price) pairs
        tax_rate: Tax rate in percent

    Returns:
        InvoiceTotals with all amounts quantized to cents

    Example:
        >>> totals = calculate_invoice_totals(
        ...     [(Decimal("8"), Decimal("100")), (Decimal("1.5"), Decimal("80"))],
        ...     Decimal("10"),
        ... )
        >>> (totals.subtotal, totals.tax_amount, totals.total)
        (Decimal('920.00'), Decimal('92.00'), Decimal('1012.00'))
    """
    line_amounts = [calculate_line_amount(quantity, rate) for quantity, rate in lines]
    subtotal = quantize_money(sum(line_amounts, Decimal("0")))
    tax_amount = calculate_tax(subtotal, tax_rate)
    total = quantize_money(subtotal + tax_amount)

    return InvoiceTotals(
        subtotal=subtotal,
        tax_rate=quantize_money(to_decimal(tax_rate)),
        tax_amount=tax_amount,
        total=total,
        line_amounts=line_amounts,
    )
