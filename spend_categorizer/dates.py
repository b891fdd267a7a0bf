"""Day-first date parsing and month keys.

Bank exports mix ISO dates, ``D/M/YYYY`` dates and prose dates such as
``"3:45pm Mon 1 September, 2025"``. :func:`parse_date` tries those shapes in a
fixed order and otherwise gives up. It never falls back to a generic parser,
because generic parsers read ``01/02/2024`` month-first.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date
from typing import Any

from .models import Transaction

MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Lower-case English month name -> 1-based month number.
MONTHS: dict[str, int] = {name.lower(): i for i, name in enumerate(MONTH_NAMES, start=1)}

ALL_MONTHS_LABEL = "All months"

_ISO = re.compile(r"^([0-9]{4})[/-]([0-9]{1,2})[/-]([0-9]{1,2})$")
_DAY_FIRST = re.compile(r"^([0-9]{1,2})[/-]([0-9]{1,2})[/-]([0-9]{4})$")
_LEADING_TIME = re.compile(r"^[0-9]{1,2}:[0-9]{2}\s*(am|pm)\s*", re.IGNORECASE)
_PROSE = re.compile(
    r"^(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun)?\s*([0-9]{1,2})\s+(" + "|".join(MONTH_NAMES) + r"),?\s+([0-9]{4})",
    re.IGNORECASE,
)
_MONTH_KEY = re.compile(r"^[0-9]{4}-[0-9]{2}$")


def _make_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date(raw: Any) -> date | None:
    """Parse ``raw`` into a calendar date, or ``None`` when unparseable.

    Order (first match wins):

    1. ``YYYY-MM-DD`` / ``YYYY/MM/DD``
    2. ``D/M/YYYY`` / ``D-M-YYYY`` (day first)
    3. ``[H:MMam|pm] [Mon..Sun] D MonthName[,] YYYY``
    """

    if not raw:
        return None
    s = str(raw).strip()

    m = _ISO.match(s)
    if m:
        return _make_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = _DAY_FIRST.match(s)
    if m:
        return _make_date(int(m.group(3)), int(m.group(2)), int(m.group(1)))

    m = _PROSE.match(_LEADING_TIME.sub("", s, count=1))
    if m:
        month = MONTHS.get(m.group(2).lower())
        if month is not None:
            return _make_date(int(m.group(3)), month, int(m.group(1)))

    return None


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def transaction_month(raw: Any) -> str | None:
    """Canonical ``YYYY-MM`` key of a raw date string, ``None`` if unparseable."""

    d = parse_date(raw)
    return month_key(d) if d is not None else None


def first_transaction_month(transactions: Sequence[Transaction]) -> str | None:
    if not transactions:
        return None
    return transaction_month(transactions[0].date)


def format_month_label(key: str | None) -> str:
    """``"2025-06"`` -> ``"June 2025"``."""

    if not key:
        return ALL_MONTHS_LABEL
    year, _, month = key.partition("-")
    if not (year.isdigit() and month.isdigit() and 1 <= int(month) <= 12):
        return key
    return f"{MONTH_NAMES[int(month) - 1]} {int(year)}"


def friendly_month_or_all(label: Any) -> str:
    if not label:
        return ALL_MONTHS_LABEL
    if isinstance(label, str) and _MONTH_KEY.match(label):
        return format_month_label(label)
    return str(label)


__all__ = [
    "ALL_MONTHS_LABEL",
    "MONTHS",
    "MONTH_NAMES",
    "first_transaction_month",
    "format_month_label",
    "friendly_month_or_all",
    "month_key",
    "parse_date",
    "transaction_month",
]
