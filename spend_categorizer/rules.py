"""Keyword rules: parsing, matching, categorization and rule-text upserts.

Rule text is line oriented::

    # comments and blank lines are ignored
    woolworths => GROCERIES
    paypal netflix => STREAMING

Rules keep their textual order and the first matching rule wins. A keyword
with several tokens matches only when every token is present.
"""

from __future__ import annotations

import re
from collections.abc import MutableSequence, Sequence
from decimal import Decimal
from functools import lru_cache

from .logging_setup import get_logger
from .models import Rule, Transaction

_logger = get_logger("spend_categorizer.rules")

_LINE_BREAK = re.compile(r"\r?\n")
_ARROW = re.compile(r"=>", re.IGNORECASE)

# Token characters are letters, digits, "&", "." and "_". Any other character
# or a string edge is a boundary, so "amazon.com" and "m&s" stay whole.
_DELIM = r"[^A-Za-z0-9&._]"

# Micro-purchases at fuel stations are almost always coffee.
PETROL_CATEGORY = "PETROL"
COFFEE_CATEGORY = "COFFEE"
MICRO_PURCHASE_LIMIT = Decimal("2.00")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _split_rule_line(line: str) -> tuple[str, str] | None:
    trimmed = line.strip()
    if not trimmed or trimmed.startswith("#"):
        return None
    parts = _ARROW.split(trimmed)
    if len(parts) < 2:
        return None
    # Anything after a second "=>" is ignored.
    return parts[0].strip(), parts[1].strip()


def parse_rules(text: str | None) -> list[Rule]:
    """Parse rule text into an ordered list of :class:`Rule`.

    Lines without ``=>`` or with an empty keyword/category are skipped.
    """

    rules: list[Rule] = []
    for line in _LINE_BREAK.split(text or ""):
        parsed = _split_rule_line(line)
        if parsed is None:
            continue
        keyword, category = parsed[0].lower(), parsed[1].upper()
        if keyword and category:
            rules.append(Rule(keyword=keyword, category=category))
    return rules


def rule_categories(rules: Sequence[Rule]) -> list[str]:
    """Distinct rule categories in first-seen order."""

    return list(dict.fromkeys(r.category for r in rules))


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1024)
def _token_pattern(token: str) -> re.Pattern[str]:
    return re.compile(f"(?:^|{_DELIM}){re.escape(token)}(?:{_DELIM}|$)", re.IGNORECASE)


def matches_keyword(description: str | None, keyword: str | None) -> bool:
    """Return ``True`` when every token of ``keyword`` appears word-bounded."""

    if not keyword:
        return False
    tokens = keyword.lower().split()
    if not tokens:
        return False
    text = (description or "").lower()
    return all(_token_pattern(tok).search(text) for tok in tokens)


def match_rule(description: str | None, rules: Sequence[Rule]) -> Rule | None:
    """First rule (in order) whose keyword matches ``description``."""

    text = (description or "").lower()
    for rule in rules:
        if matches_keyword(text, rule.keyword):
            return rule
    return None


def categorise(
    transactions: MutableSequence[Transaction] | Sequence[Transaction],
    rules: Sequence[Rule],
) -> Sequence[Transaction]:
    """Assign rule categories in place and return ``transactions``.

    Unmatched transactions get ``None`` (shown as ``UNCATEGORISED``).
    Transactions whose category the user assigned are not touched.
    """

    matched_count = 0
    for txn in transactions:
        if txn.assigned:
            continue
        rule = match_rule(txn.description, rules)
        category = rule.category if rule is not None else None
        if (
            category is not None
            and category.upper() == PETROL_CATEGORY
            and abs(txn.amount) <= MICRO_PURCHASE_LIMIT
        ):
            category = COFFEE_CATEGORY
        if category is not None:
            matched_count += 1
        txn.category = category

    _logger.debug(
        "categorise: transactions=%d rules=%d matched=%d",
        len(transactions),
        len(rules),
        matched_count,
    )
    return transactions


# ---------------------------------------------------------------------------
# Rule-text editing
# ---------------------------------------------------------------------------


def format_rule_line(keyword: str, category: str) -> str:
    return f"{keyword.strip().upper()} => {category.strip().upper()}"


def _writable(keyword: str, category: str) -> bool:
    if keyword.startswith("#"):
        return False
    return not any(_ARROW.search(part) or _LINE_BREAK.search(part) for part in (keyword, category))


def upsert_rule(rule_text: str | None, keyword: str | None, category: str | None) -> tuple[str, bool]:
    """Replace the rule for ``keyword`` or append a new one.

    Returns ``(new_text, ok)``. The text is left unchanged with ``ok=False``
    when the keyword or category is empty, or when the rule line would not
    read back as the same rule (a ``#`` keyword, an ``=>`` or a line break in
    either part). Comments, blank lines and other rules are kept verbatim
    and in order.
    """

    text = rule_text or ""
    kw = (keyword or "").strip()
    cat = (category or "").strip()
    if not kw or not cat or not _writable(kw, cat):
        return text, False

    new_line = format_rule_line(kw, cat)
    lines = _LINE_BREAK.split(text) if text else []
    # Compare against the keyword as written, so case folding round-trips.
    kw_lower = kw.upper().lower()

    for i, line in enumerate(lines):
        parsed = _split_rule_line(line)
        if parsed is not None and parsed[0].upper().lower() == kw_lower:
            lines[i] = new_line
            return "\n".join(lines), True

    if lines and lines[-1] == "":
        # Keep a trailing newline trailing.
        lines.insert(len(lines) - 1, new_line)
    else:
        lines.append(new_line)
    return "\n".join(lines), True


__all__ = [
    "COFFEE_CATEGORY",
    "MICRO_PURCHASE_LIMIT",
    "PETROL_CATEGORY",
    "categorise",
    "format_rule_line",
    "match_rule",
    "matches_keyword",
    "parse_rules",
    "rule_categories",
    "upsert_rule",
]
