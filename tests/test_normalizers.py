from decimal import Decimal

import pytest

from spend_categorizer.normalizers import (
    escape_for_display,
    format_amount,
    parse_amount,
    to_title_case,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("$1,234.56", Decimal("1234.56")),
        ("-12.00 CR", Decimal("-12.00")),
        ("  7 ", Decimal("7")),
        (".5", Decimal("0.5")),
        (3, Decimal("3")),
    ],
)
def test_parse_amount_strips_symbols_and_separators(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "abc", "1.2.3", "--5", "-", "."])
def test_parse_amount_never_raises_and_defaults_to_zero(raw):
    assert parse_amount(raw) == 0


def test_format_amount_rounds_half_up_to_two_places():
    assert format_amount(Decimal("2.005")) == "2.01"
    assert format_amount(Decimal("-3")) == "-3.00"


def test_to_title_case():
    assert to_title_case("COFFEE") == "Coffee"
    assert to_title_case("eating_out--late  night") == "Eating Out Late Night"
    assert to_title_case("  fuel ") == "Fuel"
    assert to_title_case(None) == ""


def test_escape_for_display_escapes_ampersand_first():
    assert escape_for_display("M&S <b>\"x\"</b> 'y'") == (
        "M&amp;S &lt;b&gt;&quot;x&quot;&lt;/b&gt; &#039;y&#039;"
    )
    assert escape_for_display("&lt;") == "&amp;lt;"


def test_format_amount_handles_amounts_beyond_context_precision():
    huge = Decimal("1" * 27)
    assert format_amount(huge) == "1" * 27 + ".00"
    assert format_amount(Decimal("9" * 30 + ".995")) == "1" + "0" * 30 + ".00"
    assert format_amount(parse_amount("-" + "4" * 40)) == "-" + "4" * 40 + ".00"
