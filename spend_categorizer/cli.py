# ruff: noqa: I001
"""CLI for the ``spend_categorizer`` package.

Command handlers (``cmd_*``) take plain arguments, operate on the workspace
saved under ``SPEND_CATEGORIZER_HOME`` and return a process exit code. The
Typer commands at the bottom only parse options and delegate. ``.env`` is
loaded from the working directory by the root callback before anything runs.
"""

from __future__ import annotations

import math
import sys
from datetime import date
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .config import load_settings
from .dates import format_month_label, friendly_month_or_all
from .keywords import derive_keyword
from .logging_setup import configure_logging, get_logger
from .normalizers import format_amount, to_title_case
from .report import format_percent, render_totals_html, render_totals_report, totals_filename
from .state import AppState
from .store import load_workspace, save_workspace

PAGE_SIZE = 10

console = Console()
_logger = get_logger("spend_categorizer.cli")


# ---- Small module-level helpers ---------------------------------------------


def _error(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def _load() -> AppState:
    return load_workspace(load_settings().home)


def _save(state: AppState) -> int:
    try:
        save_workspace(state, load_settings().home)
    except OSError as e:
        return _error(f"could not save workspace: {e}")
    return 0


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8-sig")
    except PermissionError:
        _error(f"permission denied: {path}")
        return None
    except UnicodeDecodeError as e:
        _error(f"{path} is not UTF-8 text: {e}")
        return None
    except OSError as e:
        _error(f"could not read {path}: {e}")
        return None


def _view_label(state: AppState) -> str:
    label = friendly_month_or_all(state.month_filter)
    if state.category_filter:
        label += f' + category "{state.category_filter}"'
    return label


def _print_summary(state: AppState) -> None:
    s = state.summary()
    console.print(
        f"Showing {s.count} transactions for [bold]{_view_label(state)}[/bold] · "
        f"Debit: ${format_amount(s.debit)} · Credit: ${format_amount(s.credit)} · "
        f"Net: ${format_amount(s.net)}",
        highlight=False,
    )


# ---- Command handlers --------------------------------------------------------


def cmd_import_csv(csv_path: str) -> int:
    path = Path(csv_path)
    if not path.exists():
        return _error(f"CSV not found: {csv_path}")
    text = _read_text(path)
    if text is None:
        return 1

    state = _load()
    count = state.load_csv(text, load_settings().columns)
    rc = _save(state)
    if rc:
        return rc
    if count == 0:
        print("No transactions found.")
        return 1
    print(f"Imported {count} transactions from {path.name}.")
    return 0


def cmd_transactions(page: int = 1) -> int:
    state = _load()
    state.apply_rules()
    visible_ids = {id(t) for t in state.visible_transactions()}
    indexed = [(i, t) for i, t in enumerate(state.transactions) if id(t) in visible_ids]

    pages = max(1, math.ceil(len(indexed) / PAGE_SIZE))
    page = min(max(1, page), pages)
    start = (page - 1) * PAGE_SIZE

    table = Table(title=f"Transactions: {_view_label(state)}")
    table.add_column("#", justify="right")
    table.add_column("Date")
    table.add_column("Amount", justify="right")
    table.add_column("Category")
    table.add_column("Description")
    for i, t in indexed[start : start + PAGE_SIZE]:
        category = to_title_case(t.category) if t.category else "Uncategorised"
        table.add_row(str(i), t.date, format_amount(t.amount), category, t.description)
    console.print(table)
    console.print(f"Page {page} / {pages}", highlight=False)
    return 0


def cmd_totals() -> int:
    state = _load()
    state.apply_rules()
    totals = state.totals()

    table = Table(title=f"Category totals: {friendly_month_or_all(state.month_filter)}")
    table.add_column("Category")
    table.add_column("Total", justify="right")
    table.add_column("%", justify="right")
    for row in totals.rows:
        table.add_row(to_title_case(row.category), format_amount(row.total), format_percent(row.percent))
    table.add_section()
    table.add_row("Total", format_amount(totals.grand_total), "100%")
    console.print(table)
    _print_summary(state)
    return 0


def cmd_months() -> int:
    state = _load()
    months = state.months()
    if not months:
        print("No dated transactions.")
        return 0
    for key in months:
        marker = "*" if key == state.month_filter else " "
        print(f"{marker} {key}  {format_month_label(key)}")
    return 0


def cmd_filter(*, month: str | None, category: str | None, clear: bool) -> int:
    state = _load()
    if clear:
        state.set_month_filter(None)
        state.set_category_filter(None)
    if month is not None:
        if month and month not in state.months():
            return _error(f"no transactions in month {month!r}")
        state.set_month_filter(month)
    if category is not None:
        state.set_category_filter(category)
    rc = _save(state)
    if rc:
        return rc
    print(f"Showing: {_view_label(state)}")
    return 0


def cmd_show_rules() -> int:
    print(_load().rule_text, end="")
    return 0


def cmd_add_rule(keyword: str, category: str) -> int:
    state = _load()
    if not state.add_rule(keyword, category):
        return _error(
            "keyword and category must be non-empty, the keyword may not start"
            " with '#' and neither may contain '=>'"
        )
    rc = _save(state)
    if rc:
        return rc
    print(f"Rule saved: {keyword.strip().upper()} => {category.strip().upper()}")
    return 0


def cmd_import_rules(rules_path: str) -> int:
    path = Path(rules_path)
    if not path.exists():
        return _error(f"rules file not found: {rules_path}")
    text = _read_text(path)
    if text is None:
        return 1
    state = _load()
    state.rule_text = text
    state.apply_rules()
    rc = _save(state)
    if rc:
        return rc
    print(f"Loaded {len(state.rules)} rules from {path.name}.")
    return 0


def cmd_export_rules(rules_path: str) -> int:
    state = _load()
    try:
        Path(rules_path).write_text(state.rule_text, encoding="utf-8")
    except OSError as e:
        return _error(f"could not write {rules_path}: {e}")
    print(f"Rules written to {rules_path}")
    return 0


def cmd_suggest_keyword(index: int) -> int:
    state = _load()
    if not 0 <= index < len(state.transactions):
        return _error(f"no transaction at index {index}")
    keyword = derive_keyword(state.transactions[index])
    if not keyword:
        return _error("no keyword could be derived from the description")
    print(keyword)
    return 0


def _pick_category(state: AppState, index: int) -> tuple[str, str | None] | None:
    """Interactive flow; returns ``(category, keyword_override)`` or ``None``."""

    from .term_ui import AddCategoryRequest, prompt_text, select_category

    txn = state.transactions[index]
    choice = select_category(state.choices(), default=txn.category or "Uncategorised")
    if not isinstance(choice, AddCategoryRequest):
        return choice, None

    keyword = prompt_text("Keyword to match: ", default=derive_keyword(txn))
    if not keyword:
        return None
    category = prompt_text("Category name: ", default=choice.name or (txn.category or ""))
    if not category:
        return None
    return category, keyword


def cmd_assign(index: int, category: str | None) -> int:
    state = _load()
    if not 0 <= index < len(state.transactions):
        return _error(f"no transaction at index {index}")

    keyword: str | None = None
    if category is None:
        picked = _pick_category(state, index)
        if picked is None:
            print("Cancelled.")
            return 1
        category, keyword = picked

    if not state.assign_category(index, category, keyword=keyword):
        return _error("category must be non-empty")
    rc = _save(state)
    if rc:
        return rc
    txn = state.transactions[index]
    print(f"Transaction {index} -> {to_title_case(txn.category) if txn.category else 'Uncategorised'}")
    return 0


def cmd_export_totals(output: str | None, *, html: bool = False) -> int:
    state = _load()
    state.apply_rules()
    txns = state.month_transactions()
    label = state.export_label(today=date.today())
    if html:
        text = render_totals_html(txns)
        target = Path(output or totals_filename(label, suffix=".html"))
    else:
        text = render_totals_report(txns, label=label)
        target = Path(output or totals_filename(label))
    try:
        target.write_text(text, encoding="utf-8")
    except OSError as e:
        return _error(f"could not write {target}: {e}")
    _logger.info("Exported totals for %s to %s", label, target)
    print(f"Totals written to {target}")
    return 0


# ---- Typer-based console interface -------------------------------------------

app = typer.Typer(
    name="spend",
    help="Categorise bank transactions with keyword rules and report totals.",
    no_args_is_help=True,
)


def _exit(code: int) -> None:
    if code:
        raise typer.Exit(code)


@app.callback()
def _root() -> None:
    """Load ``.env`` from the working directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(load_settings().log_level)


@app.command("import-csv")
def import_csv_cmd(
    csv_path: Annotated[Path, typer.Argument(help="Bank CSV export", dir_okay=False)],
) -> None:
    """Import a bank CSV, replacing all current transactions."""
    _exit(cmd_import_csv(str(csv_path)))


@app.command("transactions")
def transactions_cmd(
    page: Annotated[int, typer.Option(help="Page number (10 rows per page)")] = 1,
) -> None:
    """List the transactions visible under the current filters."""
    _exit(cmd_transactions(page))


@app.command("totals")
def totals_cmd() -> None:
    """Show category totals for the current month filter."""
    _exit(cmd_totals())


@app.command("months")
def months_cmd() -> None:
    """List the months present in the imported transactions."""
    _exit(cmd_months())


@app.command("filter")
def filter_cmd(
    month: Annotated[str | None, typer.Option(help="Month as YYYY-MM ('' for all)")] = None,
    category: Annotated[str | None, typer.Option(help="Category ('' for all)")] = None,
    clear: Annotated[bool, typer.Option("--clear", help="Clear both filters")] = False,
) -> None:
    """Set or clear the month and category filters."""
    _exit(cmd_filter(month=month, category=category, clear=clear))


@app.command("rules")
def rules_cmd() -> None:
    """Print the current rule text."""
    _exit(cmd_show_rules())


@app.command("add-rule")
def add_rule_cmd(
    keyword: Annotated[str, typer.Argument(help="Keyword (all tokens must match)")],
    category: Annotated[str, typer.Argument(help="Category to assign")],
) -> None:
    """Add a rule or replace the rule with the same keyword."""
    _exit(cmd_add_rule(keyword, category))


@app.command("import-rules")
def import_rules_cmd(
    rules_path: Annotated[Path, typer.Argument(help="Rules text file", dir_okay=False)],
) -> None:
    """Replace the rule text with the contents of a file."""
    _exit(cmd_import_rules(str(rules_path)))


@app.command("export-rules")
def export_rules_cmd(
    rules_path: Annotated[str, typer.Argument(help="Destination file")] = "rules_export.txt",
) -> None:
    """Write the rule text to a file."""
    _exit(cmd_export_rules(rules_path))


@app.command("suggest-keyword")
def suggest_keyword_cmd(
    index: Annotated[int, typer.Argument(help="Transaction number from 'transactions'")],
) -> None:
    """Print the rule keyword suggested for a transaction."""
    _exit(cmd_suggest_keyword(index))


@app.command("assign")
def assign_cmd(
    index: Annotated[int, typer.Argument(help="Transaction number from 'transactions'")],
    category: Annotated[
        str | None, typer.Option(help="Category to assign (prompts when omitted)")
    ] = None,
) -> None:
    """Assign a category to a transaction and learn a rule for its merchant."""
    _exit(cmd_assign(index, category))


@app.command("export-totals")
def export_totals_cmd(
    output: Annotated[str | None, typer.Option(help="Output file path")] = None,
    html: Annotated[bool, typer.Option("--html", help="Write an HTML table")] = False,
) -> None:
    """Write the category totals report for the current month filter."""
    _exit(cmd_export_totals(output, html=html))


if __name__ == "__main__":  # pragma: no cover
    app()
