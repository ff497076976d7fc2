"""JSON log lines on stderr for the admin CLI.

Command results own stdout; everything logged under the ``txnadmin`` namespace
is written to stderr as one JSON object per line. :class:`StructuredLogger`
attaches keyword fields to each line, and :meth:`StructuredLogger.bind` returns
a logger that repeats a fixed set of context fields (an admin URL, a command
name) on every line it writes.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any, Dict, Optional

ROOT_LOGGER = "txnadmin"

# payload keys a structured field may not overwrite
_RESERVED = ("timestamp", "level", "logger", "message")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }

        fields = getattr(record, "extra_fields", None) or {}
        for key, value in fields.items():
            if key in _RESERVED:
                key = f"field_{key}"
            log_entry[key] = value

        if record.exc_info:
            log_entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "WARNING", stream: Optional[IO[str]] = None) -> logging.Handler:
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper())

    # stdout carries command output
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JSONFormatter())

    logger.handlers = [handler]
    logger.propagate = False

    logging.getLogger("httpx").setLevel(logging.WARNING)
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


class StructuredLogger:
    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None):
        self.name = name
        self.logger = get_logger(name)
        self.context: Dict[str, Any] = dict(context or {})

    def bind(self, **fields) -> "StructuredLogger":
        return StructuredLogger(self.name, {**self.context, **fields})

    def _log(self, level: int, msg: str, fields: Dict[str, Any]) -> None:
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(level, msg, extra={"extra_fields": {**self.context, **fields}}, stacklevel=3)

    def debug(self, msg: str, **kwargs):
        self._log(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs):
        self._log(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs):
        self._log(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs):
        self._log(logging.ERROR, msg, kwargs)
