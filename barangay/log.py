"""Logging setup for the API.

Modules log through ``logging.getLogger(__name__)``; this module only
attaches a single handler to the ``barangay`` logger. JSON lines are
available for deployments that ship logs to an aggregator.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

ROOT_LOGGER = "barangay"


class JsonLogFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited docstring
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        for attr in ("user", "path", "collection"):
            if hasattr(record, attr):
                payload[attr] = getattr(record, attr)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(app) -> logging.Logger:
    """Attach a stream handler to the package logger using ``app.config``."""
    logger = logging.getLogger(ROOT_LOGGER)
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logger.setLevel(level)
    if logger.handlers:
        # create_app runs once per test; keep a single handler
        return logger

    handler = logging.StreamHandler(sys.stdout)
    if app.config.get("LOG_JSON"):
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    logger.addHandler(handler)
    return logger
