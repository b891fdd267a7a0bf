"""Environment-driven settings.

The CLI loads ``.env`` from the working directory first (without overriding
variables that are already set), then calls :func:`load_settings`.

Variables
---------
``SPEND_CATEGORIZER_HOME``
    Workspace directory holding ``workspace.json`` (default ``./.spend``).
``SPEND_CATEGORIZER_LOG_LEVEL``
    Log level name or number (default ``INFO``).
``SPEND_COLUMN_DATE`` / ``SPEND_COLUMN_AMOUNT`` / ``SPEND_COLUMN_DESCRIPTION``
    0-based column indices of the bank export.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .logging_setup import LOG_LEVEL_ENV, get_logger
from .models import ColumnMapping

HOME_ENV = "SPEND_CATEGORIZER_HOME"
COLUMN_ENVS = {
    "date": "SPEND_COLUMN_DATE",
    "amount": "SPEND_COLUMN_AMOUNT",
    "description": "SPEND_COLUMN_DESCRIPTION",
}

_logger = get_logger("spend_categorizer.config")


@dataclass(frozen=True, slots=True)
class Settings:
    home: Path
    log_level: str = "INFO"
    columns: ColumnMapping = field(default_factory=ColumnMapping)


def get_home() -> Path:
    """Workspace root: ``SPEND_CATEGORIZER_HOME`` or ``./.spend``."""

    root = os.getenv(HOME_ENV)
    if root and root.strip():
        return Path(root).expanduser().resolve()
    return (Path.cwd() / ".spend").resolve()


def _column_override(env_name: str, default: int) -> int:
    raw = os.getenv(env_name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        value = -1
    if value < 0:
        _logger.warning("Ignoring %s=%r: expected a non-negative integer", env_name, raw)
        return default
    return value


def load_columns() -> ColumnMapping:
    base = ColumnMapping()
    return ColumnMapping(
        date=_column_override(COLUMN_ENVS["date"], base.date),
        amount=_column_override(COLUMN_ENVS["amount"], base.amount),
        description=_column_override(COLUMN_ENVS["description"], base.description),
        min_cells=base.min_cells,
    )


def load_settings() -> Settings:
    return Settings(
        home=get_home(),
        log_level=(os.getenv(LOG_LEVEL_ENV) or "INFO").strip() or "INFO",
        columns=load_columns(),
    )


__all__ = ["COLUMN_ENVS", "HOME_ENV", "Settings", "get_home", "load_columns", "load_settings"]
