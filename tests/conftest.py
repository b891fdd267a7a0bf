"""Pytest configuration for test isolation.

The CLI persists its workspace under ``SPEND_CATEGORIZER_HOME`` (default
``./.spend``). To keep tests hermetic, an autouse fixture points it at a
per-test temporary directory and clears the column overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from spend_categorizer.config import COLUMN_ENVS, HOME_ENV


@pytest.fixture(autouse=True)
def _isolate_workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "spend-home"
    home.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv(HOME_ENV, os.fspath(home))
    for env_name in COLUMN_ENVS.values():
        monkeypatch.delenv(env_name, raising=False)
    # Keep .env lookups away from the repo root.
    monkeypatch.chdir(tmp_path)
    return home


def _bank_row(date: str, amount: str, description: str) -> list[str]:
    row = [""] * 10
    row[2] = date
    row[5] = amount
    row[9] = description
    return row


@pytest.fixture
def bank_row():
    """Builder for 10-cell rows in the default layout (date=2, amount=5, description=9)."""

    return _bank_row


@pytest.fixture
def bank_csv() -> str:
    header = "Account,Type,Date,Ref,Code,Amount,Balance,Memo,Other,Description"
    lines = [
        header,
        'A1,POS,01/06/2025,,,"$1,234.56",,,,"WOOLWORTHS 1234 SYDNEY"',
        "A1,POS,02/06/2025,,,1.50,,,,PETROL STATION #4",
        "A1,POS,15/06/2025,,,45.00,,,,PAYPAL *NETFLIX 4029357733",
        "A1,CR,20/06/2025,,,-500.00,,,,SALARY ACME PTY LTD",
        "A1,POS,2025-07-03,,,60.00,,,,VISA-SHELL COLES EXPRESS",
        "A1,POS,03/07/2025,,,0.00,,,,ZERO AMOUNT ROW",
        "A1,POS,,,,12.00,,,,",
        "short,row",
    ]
    return "\n".join(lines) + "\n"
