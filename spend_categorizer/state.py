"""Explicit application state and the operations the outer surface needs.

``AppState`` bundles what a front end keeps between interactions: the
imported transactions, the editable rule text and the two view filters. Each
method is a thin composition of the pure core functions.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from .aggregate import (
    available_months,
    category_choices,
    compute_category_totals,
    filter_by_category,
    filter_by_month,
    month_summary,
)
from .dates import first_transaction_month, friendly_month_or_all, month_key
from .ingest import import_rows, read_csv_rows
from .keywords import derive_keyword
from .logging_setup import get_logger
from .models import UNCATEGORISED, CategoryTotals, ColumnMapping, MonthSummary, Rule, Transaction
from .rules import categorise, parse_rules, upsert_rule

DEFAULT_RULE_TEXT = "# Rules format: KEYWORD => CATEGORY\n"

_logger = get_logger("spend_categorizer.state")


@dataclass(slots=True)
class AppState:
    transactions: list[Transaction] = field(default_factory=list)
    rule_text: str = DEFAULT_RULE_TEXT
    category_filter: str | None = None
    month_filter: str | None = None

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    def load_rows(self, rows: Sequence[Sequence[str]], columns: ColumnMapping | None = None) -> int:
        """Replace all transactions with ``rows`` and categorise them."""

        self.transactions = import_rows(rows, columns)
        if self.month_filter and self.month_filter not in self.months():
            self.month_filter = None
        self.apply_rules()
        _logger.info("Imported %d transactions", len(self.transactions))
        return len(self.transactions)

    def load_csv(self, csv_text: str, columns: ColumnMapping | None = None) -> int:
        return self.load_rows(read_csv_rows(csv_text), columns)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def rules(self) -> list[Rule]:
        return parse_rules(self.rule_text)

    def months(self) -> list[str]:
        return available_months(self.transactions)

    def month_transactions(self) -> list[Transaction]:
        return filter_by_month(self.transactions, self.month_filter)

    def visible_transactions(self) -> list[Transaction]:
        return filter_by_category(self.month_transactions(), self.category_filter)

    def totals(self) -> CategoryTotals:
        return compute_category_totals(self.month_transactions())

    def summary(self) -> MonthSummary:
        return month_summary(self.visible_transactions())

    def choices(self) -> list[str]:
        return category_choices(self.transactions, self.rules)

    def export_label(self, today: date | None = None) -> str:
        """Month label for exports: filter, else first transaction, else ``today``."""

        key = self.month_filter or first_transaction_month(self.month_transactions())
        if key is None and today is not None:
            key = month_key(today)
        return friendly_month_or_all(key)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_month_filter(self, month: str | None) -> None:
        self.month_filter = (month or "").strip() or None

    def set_category_filter(self, category: str | None) -> None:
        self.category_filter = (category or "").strip().upper() or None

    def apply_rules(self) -> list[Transaction]:
        """Re-run the rules over the month-filtered transactions."""

        txns = self.month_transactions()
        categorise(txns, self.rules)
        return txns

    def add_rule(self, keyword: str, category: str) -> bool:
        self.rule_text, ok = upsert_rule(self.rule_text, keyword, category)
        if ok:
            self.apply_rules()
        return ok

    def assign_category(
        self, index: int, category: str | None, *, keyword: str | None = None
    ) -> bool:
        """Record the user's category for one transaction and learn a rule.

        The rule keyword is ``keyword`` when given, otherwise derived from the
        description. ``Uncategorised`` clears the category without adding a
        rule. Returns ``False`` for an unknown index or an empty category.
        """

        if not 0 <= index < len(self.transactions):
            return False
        chosen = (category or "").strip()
        if not chosen:
            return False

        txn = self.transactions[index]
        txn.assigned = True
        if chosen.upper() == UNCATEGORISED:
            txn.category = None
            _logger.info("Cleared category of transaction %d", index)
            return True

        txn.category = chosen.upper()
        keyword = (keyword or "").strip() or derive_keyword(txn)
        if keyword:
            self.rule_text, _ = upsert_rule(self.rule_text, keyword, txn.category)
        self.apply_rules()
        _logger.info(
            "Assigned %s to transaction %d (keyword=%r)", txn.category, index, keyword
        )
        return True


__all__ = ["DEFAULT_RULE_TEXT", "AppState"]
