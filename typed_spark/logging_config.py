"""
Structured logging for typed_spark.

Session and dataset events attach their data through ``extra`` (master,
app_name, options, log_level; type, rows, schema). StructuredFormatter
writes those fields as JSON keys or key=value pairs next to the message.
"""

import json
import logging
import sys
from typing import Any

from typed_spark.constants import LOGGER_NAME

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def event_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Fields passed with ``extra=``, in the order they were given."""
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}


class StructuredFormatter(logging.Formatter):
    """Format typed_spark records as JSON or key=value, including event fields."""

    def __init__(self, use_json: bool = True):
        super().__init__()
        self._use_json = use_json

    def format(self, record: logging.LogRecord) -> str:
        fields = event_fields(record)
        if self._use_json:
            out = {
                "message": record.getMessage(),
                "level": record.levelname,
                "logger": record.name,
                **fields,
            }
            if record.exc_info:
                out["exception"] = self.formatException(record.exc_info)
            return json.dumps(out, default=str)
        parts = [f"level={record.levelname}", f"logger={record.name}", f"msg={record.getMessage()}"]
        parts.extend(f"{k}={v}" for k, v in fields.items())
        if record.exc_info:
            parts.append(f"exception={self.formatException(record.exc_info)!r}")
        return " ".join(parts)


def configure_typed_spark_logging(
    level: int = logging.INFO,
    use_json: bool = False,
    stream: Any = None,
) -> None:
    """
    Attach a StructuredFormatter handler to the typed_spark logger.

    Calling it again keeps the existing handler and only updates the level.
    """
    logger = get_logger()
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter(use_json=use_json))
        logger.addHandler(handler)
