"""Structured logging configuration for the trace dashboard."""

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from pathlib import Path

from .config import DEFAULT_LOG_PATH

# Attributes passed through ``extra=`` that end up in the JSON record.
CONTEXT_FIELDS = ("thread_id", "channel", "owner", "url")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with trace context fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(
            (field, getattr(record, field)) for field in CONTEXT_FIELDS if hasattr(record, field)
        )
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str | None = None, log_file: str | None = None) -> None:
    """Log JSON to stdout and to a rotating file.

    log_level falls back to $LOG_LEVEL, then INFO. log_file falls back to
    04_logs/app.log; pass "" to log to stdout only.
    """
    log_level = log_level or os.getenv("LOG_LEVEL", "INFO")
    if log_file is None:
        log_file = str(DEFAULT_LOG_PATH)

    handlers: dict[str, dict] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        },
    }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "formatter": "json",
            "encoding": "utf-8",
        }

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"json": {"()": JSONFormatter}},
        "handlers": handlers,
        # Per-request and per-frame chatter from the transport libraries.
        "loggers": {
            "httpx": {"level": "WARNING"},
            "websockets": {"level": "WARNING"},
        },
        "root": {"level": log_level.upper(), "handlers": list(handlers)},
    })


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
