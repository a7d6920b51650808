"""Logging helpers for the node assistant.

Every record is written as one JSON object per line. Values passed through
``extra=`` are carried as additional keys, so a call such as
``logger.info("Rules generated", extra={"nodes": 3})`` stays machine readable.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict

HANDLER_NAME = "node_assistant.json"

# Attributes every LogRecord has; anything else on a record came from ``extra``.
_RECORD_FIELDS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


class JsonLineFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_FIELDS and not key.startswith("_"):
                entry[key] = value
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: int | str = logging.INFO) -> logging.Handler:
    """Set the root level and attach the JSON handler if it is not there yet.

    Calling this again only changes the level, so the API module and the CLI
    can both call it without duplicating output.
    """
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if handler.get_name() == HANDLER_NAME:
            return handler
    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(JsonLineFormatter())
    root.addHandler(handler)
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
