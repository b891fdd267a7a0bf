from decimal import Decimal

from spend_categorizer.models import Transaction
from spend_categorizer.report import (
    format_percent,
    render_totals_html,
    render_totals_report,
    totals_filename,
)


def _txn(amount, category=None):
    return Transaction(date="01/06/2025", amount=Decimal(amount), description="x", category=category)


def test_report_layout():
    txns = [_txn("100.00", "GROCERIES"), _txn("20.00", "GROCERIES"), _txn("30.00", "COFFEE")]
    report = render_totals_report(txns, label="June 2025")
    assert report.split("\n") == [
        "Category Totals (June 2025)",
        "=" * 27,
        "Category " + " " * 7 + "Amount" + " " * 6 + "%",
        "Groceries" + " " * 7 + "120.00" + " " * 2 + "80.0%",
        "Coffee" + " " * 11 + "30.00" + " " * 2 + "20.0%",
        "",
        "TOTAL" + " " * 11 + "150.00" + " " * 3 + "100%",
    ]


def test_report_widens_for_long_category_names():
    report = render_totals_report([_txn("5", "HOME_IMPROVEMENT")], label="All months")
    lines = report.split("\n")
    assert lines[3].startswith("Home Improvement ")
    assert len({len(line) for line in lines[2:] if line}) == 1


def test_report_shows_uncategorised_and_negative_totals():
    report = render_totals_report([_txn("10"), _txn("-30", "REFUNDS")], label="July 2025")
    assert "Uncategorised" in report
    assert "-30.00" in report
    assert "-20.00" in report.split("\n")[-1]


def test_empty_report_still_has_total_row():
    lines = render_totals_report([], label="All months").split("\n")
    assert lines[0] == "Category Totals (All months)"
    assert lines[-1].startswith("TOTAL")
    assert "0.00" in lines[-1]


def test_html_escapes_category_names():
    html = render_totals_html([_txn("10", "M&S <FOOD>")])
    assert 'data-cat="M&amp;S &lt;FOOD&gt;"' in html
    assert ">M&amp;s &lt;food&gt;</td>" in html
    assert "<FOOD>" not in html
    assert html.startswith('<table class="cats">')
    assert html.endswith("</table>")


def test_format_percent_rounds_half_up():
    assert format_percent(Decimal("12.25")) == "12.3%"
    assert format_percent(Decimal("0")) == "0.0%"


def test_totals_filename():
    assert totals_filename("June 2025") == "category_totals_June_2025.txt"
    assert totals_filename("All months", suffix=".html") == "category_totals_All_months.html"


def test_report_with_very_large_amounts():
    big = "1" * 27
    report = render_totals_report([_txn(big, "BIG"), _txn("1", "SMALL")], label="June 2025")
    assert "Big" in report
    assert f"{big}.00" in report
    assert report.split("\n")[-1].split()[1] == "1" * 26 + "2.00"
    assert format_percent(Decimal("1" * 30)) == "1" * 30 + ".0%"
