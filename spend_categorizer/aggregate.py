"""Category totals, filters and summaries over transaction lists.

All functions are pure: they read transactions and return new lists or
result tuples without touching the inputs.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from .dates import transaction_month
from .models import (
    UNCATEGORISED,
    CategoryTotal,
    CategoryTotals,
    MonthSummary,
    Rule,
    Transaction,
)
from .normalizers import ZERO

UNCATEGORISED_CHOICE = "Uncategorised"


def effective_category(txn: Transaction) -> str:
    """Upper-case category with the ``UNCATEGORISED`` sentinel applied."""

    return (txn.category or UNCATEGORISED).upper()


def compute_category_totals(transactions: Sequence[Transaction]) -> CategoryTotals:
    """Net signed total per effective category, largest first.

    Ties keep first-seen order. ``percent`` is ``total / grand * 100`` and
    ``0`` for every row when the grand total is zero.
    """

    by_cat: dict[str, Decimal] = {}
    for txn in transactions:
        cat = effective_category(txn)
        by_cat[cat] = by_cat.get(cat, ZERO) + txn.amount

    ordered = sorted(by_cat.items(), key=lambda kv: kv[1], reverse=True)
    grand = sum((total for _, total in ordered), ZERO)
    rows = [
        CategoryTotal(
            category=cat,
            total=total,
            percent=(total / grand * 100) if grand != 0 else ZERO,
        )
        for cat, total in ordered
    ]
    return CategoryTotals(rows=rows, grand_total=grand)


def filter_by_month(transactions: Sequence[Transaction], month: str | None) -> list[Transaction]:
    """Transactions dated in ``month`` (``YYYY-MM``); all when ``month`` is empty.

    Unparseable dates never match an active month filter.
    """

    if not month:
        return list(transactions)
    return [t for t in transactions if transaction_month(t.date) == month]


def filter_by_category(
    transactions: Sequence[Transaction], category: str | None
) -> list[Transaction]:
    if not category:
        return list(transactions)
    wanted = category.upper()
    return [t for t in transactions if effective_category(t) == wanted]


def available_months(transactions: Sequence[Transaction]) -> list[str]:
    months = {transaction_month(t.date) for t in transactions}
    return sorted(m for m in months if m is not None)


def month_summary(transactions: Sequence[Transaction]) -> MonthSummary:
    debit = ZERO
    credit = ZERO
    for txn in transactions:
        if txn.amount > 0:
            debit += txn.amount
        else:
            credit += abs(txn.amount)
    return MonthSummary(count=len(transactions), debit=debit, credit=credit, net=debit - credit)


def category_choices(transactions: Sequence[Transaction], rules: Sequence[Rule]) -> list[str]:
    """Picker entries: ``Uncategorised`` first, then known categories A-Z."""

    seen: set[str] = set()
    for raw in [t.category for t in transactions] + [r.category for r in rules]:
        name = (raw or "").strip().upper()
        if name and name != UNCATEGORISED:
            seen.add(name)
    return [UNCATEGORISED_CHOICE, *sorted(seen, key=str.casefold)]


__all__ = [
    "UNCATEGORISED_CHOICE",
    "available_months",
    "category_choices",
    "compute_category_totals",
    "effective_category",
    "filter_by_category",
    "filter_by_month",
    "month_summary",
]
