"""Suggest a rule keyword for a transaction from its description.

Heuristics, in priority order:

1. PayPal purchases (``"PAYPAL *SPOTIFY"``) -> ``"PAYPAL SPOTIFY"``
2. Card-network prefixes (``"VISA-WOOLWORTHS 1234"``) -> ``"WOOLWORTHS"``
3. The first merchant-like token of 3+ characters.
"""

from __future__ import annotations

import re

from .models import Transaction

_PAYPAL_WORD = re.compile(r"\bPAYPAL\b", re.IGNORECASE | re.ASCII)
_VISA_MARKER = re.compile(re.escape("VISA-"), re.IGNORECASE)
_LEADING_SEPARATORS = re.compile(r"^[\s\-:/*]+")
_LEADING_TOKEN = re.compile(r"^([A-Za-z0-9&._]+)")
_MERCHANT_TOKEN = re.compile(r"([A-Za-z0-9&._]{3,})")


def next_word_after(marker: str, description: str | None) -> str:
    """Merchant-like token following the first occurrence of ``marker``.

    >>> next_word_after("paypal", "PAYPAL *JOHNSSTORE 402935")
    'JOHNSSTORE'
    """

    desc = description or ""
    i = desc.lower().find(marker.lower())
    if i == -1:
        return ""
    after = _LEADING_SEPARATORS.sub("", desc[i + len(marker) :])
    m = _LEADING_TOKEN.match(after)
    return m.group(1) if m else ""


def derive_keyword(transaction: Transaction | None) -> str:
    if transaction is None:
        return ""
    desc = (transaction.description or "").strip()
    if not desc:
        return ""

    if _PAYPAL_WORD.search(desc):
        nxt = next_word_after("paypal", desc)
        return ("PAYPAL " + nxt).upper() if nxt else "PAYPAL"

    visa = _VISA_MARKER.search(desc)
    if visa:
        rest = desc[visa.end() :].split()
        if rest:
            return rest[0].upper()

    m = _MERCHANT_TOKEN.search(desc)
    return m.group(1).upper() if m else ""


__all__ = ["derive_keyword", "next_word_after"]
