"""Logging for the ``spend_categorizer`` package.

Library modules call ``get_logger("spend_categorizer.<module>")`` and never
attach handlers of their own. Until the CLI calls :func:`configure_logging`,
the package logger only carries a ``NullHandler``.
"""

from __future__ import annotations

import logging
import os

_PKG_LOGGER_NAME = "spend_categorizer"
_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False

LOG_LEVEL_ENV = "SPEND_CATEGORIZER_LOG_LEVEL"


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    name = (level or os.getenv(LOG_LEVEL_ENV) or "").strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    return numeric if isinstance(numeric, int) else logging.INFO


def configure_logging(level: int | str | None = None) -> None:
    """Send package log records to stderr at ``level``; later calls are no-ops.

    ``level`` falls back to ``SPEND_CATEGORIZER_LOG_LEVEL`` and then ``INFO``.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "get_logger"]
