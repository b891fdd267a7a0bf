"""Category-total exports (plain text and HTML table)."""

from __future__ import annotations

import re
from collections.abc import Sequence
from decimal import Decimal

from .aggregate import compute_category_totals
from .models import Transaction
from .normalizers import escape_for_display, format_amount, quantize_half_up, to_title_case

AMOUNT_WIDTH = 12
PERCENT_WIDTH = 6
MIN_CATEGORY_WIDTH = 8

_WHITESPACE = re.compile(r"\s+")


def format_percent(value: Decimal) -> str:
    return f"{quantize_half_up(value, Decimal('0.1')):.1f}%"


def _line(name: str, amount: str, pct: str, width: int) -> str:
    return f"{name.ljust(width)} {amount.rjust(AMOUNT_WIDTH)} {pct.rjust(PERCENT_WIDTH)}"


def render_totals_report(transactions: Sequence[Transaction], *, label: str) -> str:
    """Render the column-aligned category totals report.

    Layout::

        Category Totals (June 2025)
        ===========================
        Category        Amount      %
        Groceries       120.00  80.0%
        Coffee           30.00  20.0%

        TOTAL           150.00   100%
    """

    totals = compute_category_totals(transactions)
    header = f"Category Totals ({label})"
    names = [to_title_case(row.category) for row in totals.rows]
    width = max([MIN_CATEGORY_WIDTH, len("Category"), *(len(n) for n in names)])

    lines = [header, "=" * len(header), _line("Category", "Amount", "%", width)]
    for name, row in zip(names, totals.rows, strict=True):
        lines.append(_line(name, format_amount(row.total), format_percent(row.percent), width))
    lines.append("")
    lines.append(_line("TOTAL", format_amount(totals.grand_total), "100%", width))
    return "\n".join(lines)


def render_totals_html(transactions: Sequence[Transaction]) -> str:
    totals = compute_category_totals(transactions)
    parts = [
        '<table class="cats">',
        '<thead><tr><th>Category</th><th class="num">Total</th><th class="num">%</th></tr></thead>',
        "<tbody>",
    ]
    for row in totals.rows:
        parts.append(
            f'<tr><td data-cat="{escape_for_display(row.category)}">'
            f"{escape_for_display(to_title_case(row.category))}</td>"
            f'<td class="num">{format_amount(row.total)}</td>'
            f'<td class="num">{format_percent(row.percent)}</td></tr>'
        )
    parts.append("</tbody>")
    parts.append(
        f'<tfoot><tr><td>Total</td><td class="num">{format_amount(totals.grand_total)}</td>'
        '<td class="num">100%</td></tr></tfoot>'
    )
    parts.append("</table>")
    return "\n".join(parts)


def totals_filename(label: str, *, suffix: str = ".txt") -> str:
    return f"category_totals_{_WHITESPACE.sub('_', label)}{suffix}"


__all__ = [
    "format_percent",
    "render_totals_html",
    "render_totals_report",
    "totals_filename",
]
