"""
Logging helpers for blobstream.

All loggers live under the "blobstream" hierarchy so applications can tune
them as a group. setup_logging() attaches a single stream handler, in plain
text or JSON lines depending on settings.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from blobstream.config import get_settings

ROOT_LOGGER_NAME = "blobstream"

_HANDLER_NAME = "blobstream-handler"


class JsonFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the blobstream hierarchy.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Standard library logger.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(level: str | None = None, json_output: bool | None = None) -> logging.Logger:
    """
    Configure the blobstream root logger.

    Calling it again replaces the previously installed handler.

    Args:
        level: Log level name (default: settings.log_level)
        json_output: Emit JSON lines (default: settings.log_json)

    Returns:
        The configured root logger.
    """
    settings = get_settings()
    level = level or settings.log_level
    if json_output is None:
        json_output = settings.log_json

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    logger.addHandler(handler)
    return logger


__all__ = ["get_logger", "setup_logging", "JsonFormatter", "ROOT_LOGGER_NAME"]
