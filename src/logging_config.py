"""Logging configuration for the league engine.

Provides a JSON formatted logger named ``src``, the parent of every module
logger in the package, so ``logging.getLogger(__name__)`` records reach the
same handlers.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOG_NAME = "src"
LOG_FILE = Path("logs/app.log")
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 5

# Attributes every LogRecord carries on this interpreter; the rest came in via ``extra``.
RESERVED_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` fields land under ``"extra"``."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - short description
        payload: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = {k: v for k, v in vars(record).items() if k not in RESERVED_RECORD_ATTRS}
        request_id = extras.pop("request_id", None)
        if request_id is not None:
            payload["request_id"] = request_id
        if extras:
            payload["extra"] = extras
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _is_configured(logger: logging.Logger) -> bool:
    # Only our own file handler counts; test harnesses may attach capture handlers.
    return any(isinstance(h, RotatingFileHandler) for h in logger.handlers)


def _build_handlers(level: int) -> list[logging.Handler]:
    formatter = JsonFormatter()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)

    LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    logfile = RotatingFileHandler(
        LOG_FILE, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
    )
    logfile.setLevel(logging.INFO)
    logfile.setFormatter(formatter)
    return [console, logfile]


def get_logger(level: int = logging.DEBUG) -> logging.Logger:
    """Return the package logger, attaching the console and file handlers once."""
    logger = logging.getLogger(LOG_NAME)
    if _is_configured(logger):
        return logger
    logger.setLevel(level)
    for handler in _build_handlers(level):
        logger.addHandler(handler)
    logger.propagate = False
    return logger
