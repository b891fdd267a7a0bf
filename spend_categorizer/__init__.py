"""Public interface for the ``spend_categorizer`` package.

This module re-exports the categorization core (import, rules, keyword
suggestions, aggregation, reports) and the application state as the stable
import surface. There is no runtime logic here, only symbol re-exports.
"""

from .aggregate import (
    available_months,
    category_choices,
    compute_category_totals,
    effective_category,
    filter_by_category,
    filter_by_month,
    month_summary,
)
from .dates import (
    first_transaction_month,
    format_month_label,
    friendly_month_or_all,
    month_key,
    parse_date,
    transaction_month,
)
from .ingest import import_rows, load_transactions, read_csv_rows
from .keywords import derive_keyword, next_word_after
from .models import (
    UNCATEGORISED,
    CategoryTotal,
    CategoryTotals,
    ColumnMapping,
    MonthSummary,
    Rule,
    Transaction,
)
from .normalizers import escape_for_display, format_amount, parse_amount, to_title_case
from .report import render_totals_html, render_totals_report, totals_filename
from .rules import categorise, matches_keyword, parse_rules, upsert_rule
from .state import DEFAULT_RULE_TEXT, AppState

__all__ = [
    # Core operations
    "available_months",
    "categorise",
    "category_choices",
    "compute_category_totals",
    "derive_keyword",
    "effective_category",
    "escape_for_display",
    "filter_by_category",
    "filter_by_month",
    "first_transaction_month",
    "format_amount",
    "format_month_label",
    "friendly_month_or_all",
    "import_rows",
    "load_transactions",
    "matches_keyword",
    "month_key",
    "month_summary",
    "next_word_after",
    "parse_amount",
    "parse_date",
    "parse_rules",
    "read_csv_rows",
    "render_totals_html",
    "render_totals_report",
    "to_title_case",
    "totals_filename",
    "transaction_month",
    "upsert_rule",
    # Models / state
    "UNCATEGORISED",
    "DEFAULT_RULE_TEXT",
    "AppState",
    "CategoryTotal",
    "CategoryTotals",
    "ColumnMapping",
    "MonthSummary",
    "Rule",
    "Transaction",
]
