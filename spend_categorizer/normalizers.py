"""Amount and text normalization helpers.

Everything here is total: any input (including ``None``) produces a value and
nothing raises. Amounts are :class:`~decimal.Decimal` so category sums stay
exact.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

_NON_AMOUNT_CHARS = re.compile(r"[^0-9\-,.]")
_DASH_UNDERSCORE = re.compile(r"[_-]+")
_WHITESPACE = re.compile(r"\s+")

ZERO = Decimal(0)


def parse_amount(raw: Any) -> Decimal:
    """Parse a free-form amount cell such as ``"$1,234.56"`` or ``"-12.00 CR"``.

    Keeps digits, minus signs, commas and periods, drops the commas
    (thousands separators) and converts. Anything that is not a finite number
    afterwards (``""``, ``"1.2.3"``, ``"--5"``) becomes ``0``.
    """

    if raw is None:
        return ZERO
    s = _NON_AMOUNT_CHARS.sub("", str(raw)).replace(",", "")
    if not s:
        return ZERO
    try:
        d = Decimal(s)
    except InvalidOperation:
        return ZERO
    if not d.is_finite():
        return ZERO
    return d


def quantize_half_up(value: Decimal | int | float, exp: Decimal) -> Decimal:
    """Round ``value`` half-up to the exponent of ``exp`` at any magnitude."""

    d = Decimal(str(value))
    with localcontext() as ctx:
        # quantize fails when the result needs more digits than the context holds.
        ctx.prec = max(ctx.prec, d.adjusted() - exp.as_tuple().exponent + 2)
        return d.quantize(exp, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal | int | float) -> str:
    # Exactly two decimals, half-up, leading minus for negatives.
    return f"{quantize_half_up(value, Decimal('0.01')):.2f}"


def to_title_case(raw: Any) -> str:
    """``"COFFEE_SHOP-items"`` -> ``"Coffee Shop Items"``."""

    if not raw:
        return ""
    s = str(raw).lower()
    s = _DASH_UNDERSCORE.sub(" ", s)
    s = _WHITESPACE.sub(" ", s).strip()
    return " ".join(word[:1].upper() + word[1:] for word in s.split(" "))


def escape_for_display(raw: Any) -> str:
    # Ampersand first so the other entities are not escaped twice.
    return (
        str(raw)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


__all__ = [
    "ZERO",
    "escape_for_display",
    "format_amount",
    "parse_amount",
    "quantize_half_up",
    "to_title_case",
]
