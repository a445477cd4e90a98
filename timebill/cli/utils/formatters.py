"""Output formatting utilities for CLI."""

from decimal import Decimal
from typing import List, Sequence

import click


def format_success(message: str) -> str:
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    return click.style(f"ℹ {message}", fg="blue")


def format_money(value: Decimal) -> str:
    """Format an amount with thousands separators and two decimals.

    Example:
        >>> format_money(Decimal("1234.5"))
        '1,234.50'
    """
    return f"{value:,.2f}"


def _is_numeric(cell: object) -> bool:
    return isinstance(cell, (int, float, Decimal)) and not isinstance(cell, bool)


def format_table(
    headers: Sequence[str], rows: List[Sequence[object]], max_width: int = 40
) -> str:
    """Format rows as a plain-text table.

    Numeric cells are right-aligned, everything else left-aligned. Cells
    longer than ``max_width`` are cut off.

    Args:
        headers: Column headers
        rows: Data rows, one value per column
        max_width: Maximum width of a column

    Returns:
        The table, or an empty string if there are no headers
    """
    if not headers:
        return ""

    widths = [len(header) for header in headers]
    for row in rows:
        for i, cell in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], len(str(cell)))
    widths = [min(width, max_width) for width in widths]

    def render(cells: Sequence[object]) -> str:
        parts = []
        for i, width in enumerate(widths):
            cell = cells[i] if i < len(cells) else ""
            text = str(cell)[:width]
            parts.append(f" {text:>{width}} " if _is_numeric(cell) else f" {text:<{width}} ")
        return "|" + "|".join(parts) + "|"

    separator = "+" + "+".join("-" * (width + 2) for width in widths) + "+"
    lines = [separator, render(headers), separator]
    if rows:
        lines.extend(render(row) for row in rows)
        lines.append(separator)
    return "\n".join(lines)
