"""Bank CSV import: raw rows -> validated :class:`Transaction` list.

The bank layout is fixed (see :class:`~spend_categorizer.models.ColumnMapping`);
there is no header sniffing beyond checking whether the first row's amount
cell is a number. Malformed rows are dropped without raising.
"""

from __future__ import annotations

import csv
from collections.abc import Sequence
from io import StringIO
from typing import TypeAlias

from .logging_setup import get_logger
from .models import ColumnMapping, Transaction
from .normalizers import parse_amount

_logger = get_logger("spend_categorizer.ingest")

Row: TypeAlias = Sequence[str]


def _cell(row: Row, index: int) -> str:
    if index < len(row) and row[index] is not None:
        return str(row[index])
    return ""


def _has_header(rows: Sequence[Row], columns: ColumnMapping) -> bool:
    if not rows:
        return False
    return parse_amount(_cell(rows[0], columns.amount)) == 0


def import_rows(rows: Sequence[Row], columns: ColumnMapping | None = None) -> list[Transaction]:
    """Convert raw tabular rows into transactions.

    Rules:
    - Row 0 is a header when its amount cell is not a nonzero number.
    - Rows narrower than ``columns.required_cells`` are skipped.
    - A row is kept only when its amount is nonzero and it has a date or a
      description.
    """

    columns = columns or ColumnMapping()
    start = 1 if _has_header(rows, columns) else 0
    required = columns.required_cells

    txns: list[Transaction] = []
    dropped = 0
    for row in rows[start:]:
        if not row or len(row) < required:
            dropped += 1
            continue
        date_raw = _cell(row, columns.date)
        amount = parse_amount(_cell(row, columns.amount))
        description = _cell(row, columns.description).strip()
        if amount != 0 and (date_raw or description):
            txns.append(Transaction(date=date_raw, amount=amount, description=description))
        else:
            dropped += 1

    _logger.debug(
        "import_rows: kept=%d dropped=%d header=%s", len(txns), dropped, bool(start)
    )
    return txns


def read_csv_rows(csv_text: str) -> list[list[str]]:
    """Parse CSV text into rows of cells, skipping empty lines.

    Quoting follows RFC 4180 via the stdlib :mod:`csv` module. Parsing stops
    at the first malformed record (e.g. a cell over the field size limit);
    the rows read before it are returned.
    """

    rows: list[list[str]] = []
    with StringIO(csv_text.strip()) as f:
        reader = csv.reader(f)
        try:
            for row in reader:
                if row:
                    rows.append(row)
        except csv.Error as e:
            _logger.debug("read_csv_rows: stopped at line %d: %s", reader.line_num, e)
    return rows


def load_transactions(csv_text: str, columns: ColumnMapping | None = None) -> list[Transaction]:
    return import_rows(read_csv_rows(csv_text), columns)


__all__ = ["import_rows", "load_transactions", "read_csv_rows"]
