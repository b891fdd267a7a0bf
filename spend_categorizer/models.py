"""Data models for ``spend_categorizer``.

Transactions keep the raw imported date string; canonical dates and month
keys are derived on demand (see :mod:`spend_categorizer.dates`). A missing
category is stored as ``None`` and only rendered as :data:`UNCATEGORISED` at
display/aggregation time.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import NamedTuple, TypeAlias

UNCATEGORISED = "UNCATEGORISED"
"""Display/aggregation label for transactions without a category."""


# ---------------------------------------------------------------------------
# Core records
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class Transaction:
    """A single imported bank transaction.

    Attributes
    ----------
    date:
        Raw date cell as imported. Never rewritten.
    amount:
        Signed amount; positive is a debit (money spent), negative a credit.
    description:
        Free text, possibly empty.
    category:
        Upper-case category, or ``None`` when uncategorised.
    assigned:
        ``True`` when ``category`` was chosen explicitly by the user. Rule
        re-application leaves such transactions alone.
    """

    date: str
    amount: Decimal
    description: str
    category: str | None = None
    assigned: bool = False


@dataclass(frozen=True, slots=True)
class Rule:
    """``keyword => category`` with a lower-case keyword and upper-case category."""

    keyword: str
    category: str


@dataclass(frozen=True, slots=True)
class ColumnMapping:
    """0-based cell positions of the bank export layout.

    ``min_cells`` is the minimum row width for a row to be considered at all.
    """

    date: int = 2
    amount: int = 5
    description: int = 9
    min_cells: int = 10

    @property
    def required_cells(self) -> int:
        return max(self.min_cells, self.date + 1, self.amount + 1, self.description + 1)


# ---------------------------------------------------------------------------
# Aggregation results
# ---------------------------------------------------------------------------


class CategoryTotal(NamedTuple):
    category: str
    total: Decimal
    percent: Decimal


class CategoryTotals(NamedTuple):
    """Per-category rows (descending by total) and their grand total."""

    rows: list[CategoryTotal]
    grand_total: Decimal


class MonthSummary(NamedTuple):
    """Debit/credit breakdown of a visible transaction set."""

    count: int
    debit: Decimal
    credit: Decimal
    net: Decimal


Transactions: TypeAlias = Sequence[Transaction]
Rules: TypeAlias = Sequence[Rule]


__all__ = [
    "UNCATEGORISED",
    "CategoryTotal",
    "CategoryTotals",
    "ColumnMapping",
    "MonthSummary",
    "Rule",
    "Rules",
    "Transaction",
    "Transactions",
]
