"""Workspace persistence (``<home>/workspace.json``).

The workspace keeps the application state between CLI invocations: the
imported transactions, the rule text and the active filters. The on-disk JSON
is validated with Pydantic on read. A missing, unreadable or mismatched file
is treated as an empty workspace.

Atomicity: writes target ``workspace.json.tmp`` first and then
``os.replace`` into place.
"""

from __future__ import annotations

import contextlib
import json
import os
from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .config import get_home
from .logging_setup import get_logger
from .models import Transaction
from .state import AppState

# Bump only when the on-disk JSON shape changes.
SCHEMA_VERSION: int = 1

WORKSPACE_FILENAME = "workspace.json"

_logger = get_logger("spend_categorizer.store")


class StoredTransaction(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")

    date: str
    amount: str
    description: str
    category: str | None = None
    assigned: bool = False

    @field_validator("amount")
    @classmethod
    def _amount_is_decimal(cls, v: str) -> str:
        try:
            d = Decimal(v)
        except ArithmeticError as exc:
            raise ValueError(f"invalid amount: {v!r}") from exc
        if not d.is_finite():
            raise ValueError(f"invalid amount: {v!r}")
        return v


class WorkspaceFile(BaseModel):
    """Top-level schema of ``workspace.json``."""

    model_config = ConfigDict(strict=True, extra="forbid")

    schema_version: int
    rule_text: str
    category_filter: str | None = None
    month_filter: str | None = None
    transactions: list[StoredTransaction]


def workspace_path(root: Path | None = None) -> Path:
    return (root or get_home()) / WORKSPACE_FILENAME


def _to_state(parsed: WorkspaceFile) -> AppState:
    return AppState(
        transactions=[
            Transaction(
                date=t.date,
                amount=Decimal(t.amount),
                description=t.description,
                category=t.category,
                assigned=t.assigned,
            )
            for t in parsed.transactions
        ],
        rule_text=parsed.rule_text,
        category_filter=parsed.category_filter,
        month_filter=parsed.month_filter,
    )


def _to_file(state: AppState) -> WorkspaceFile:
    return WorkspaceFile(
        schema_version=SCHEMA_VERSION,
        rule_text=state.rule_text,
        category_filter=state.category_filter,
        month_filter=state.month_filter,
        transactions=[
            StoredTransaction(
                date=t.date,
                amount=str(t.amount),
                description=t.description,
                category=t.category,
                assigned=t.assigned,
            )
            for t in state.transactions
        ],
    )


def load_workspace(root: Path | None = None) -> AppState:
    """Return the saved state, or a fresh :class:`AppState` when unavailable."""

    path = workspace_path(root)
    if not path.exists():
        return AppState()

    try:
        parsed = WorkspaceFile.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValidationError):
        _logger.debug("workspace:read_failed; starting fresh path=%s", os.fspath(path), exc_info=True)
        return AppState()

    if parsed.schema_version != SCHEMA_VERSION:
        _logger.debug(
            "workspace:schema_mismatch found=%d expected=%d path=%s",
            parsed.schema_version,
            SCHEMA_VERSION,
            os.fspath(path),
        )
        return AppState()

    return _to_state(parsed)


def save_workspace(state: AppState, root: Path | None = None) -> Path:
    """Write ``state`` atomically and return the workspace path."""

    path = workspace_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")

    payload = _to_file(state).model_dump(mode="json")
    try:
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, path)
    except Exception:
        with contextlib.suppress(FileNotFoundError):
            tmp.unlink()
        raise
    _logger.debug("workspace:saved transactions=%d path=%s", len(state.transactions), os.fspath(path))
    return path


__all__ = [
    "SCHEMA_VERSION",
    "StoredTransaction",
    "WorkspaceFile",
    "load_workspace",
    "save_workspace",
    "workspace_path",
]
