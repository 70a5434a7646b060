"""
Structured logging utility for P-Tool Analyst services.

Every service calls ``setup_logger`` once at startup. Module code keeps using
``logging.getLogger(__name__)`` and passes contextual fields through ``extra``,
which end up as top-level keys in the JSON output.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """
    Logging formatter that renders each record as one JSON object per line.

    Fixed keys are ``timestamp`` (ISO 8601, UTC, millisecond precision),
    ``service``, ``level``, ``logger`` and ``message``. Fields passed via
    ``extra`` are appended as-is when JSON-native, stringified otherwise.

    Example:
        >>> logger.info("Stage complete", extra={"stage": "Forensic Checks"})
        {"timestamp": "2026-10-18T09:15:02.117Z", "service": "analysis",
         "level": "INFO", "logger": "src.workflow.graph",
         "message": "Stage complete", "stage": "Forensic Checks"}
    """

    # Attributes every LogRecord carries; anything else came from ``extra``.
    _RESERVED_ATTRS = frozenset({
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "taskName", "message",
    })

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "service": self.service_name,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in self._RESERVED_ATTRS and not key.startswith("_"):
                entry[key] = self._serialize_value(value)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False)

    def _format_timestamp(self, created: float) -> str:
        dt = datetime.fromtimestamp(created, tz=timezone.utc)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"

    def _serialize_value(self, value: Any) -> Any:
        if isinstance(value, (str, int, float, bool, type(None), list, dict)):
            return value
        return str(value)


def setup_logger(
    service_name: str,
    level: Optional[str] = None,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the root logger for a service and return it.

    Args:
        service_name: Included in every JSON entry's ``service`` field.
        level: DEBUG/INFO/WARNING/ERROR/CRITICAL. Falls back to the
               LOG_LEVEL environment variable, then INFO.
        log_format: "json" (default) or "text" for a human-readable console
                    format. Falls back to the LOG_FORMAT environment variable.

    Returns:
        The configured root logger. Module loggers obtained with
        ``logging.getLogger(__name__)`` propagate to it.

    Note:
        Existing root handlers are replaced, so calling this twice does not
        duplicate output.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if log_format is None:
        log_format = os.getenv("LOG_FORMAT", "json")

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.setLevel(numeric_level)
    if log_format.lower() == "text":
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    else:
        handler.setFormatter(JSONFormatter(service_name=service_name))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    return root
