"""Structured JSON logging helpers."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

# Attributes every LogRecord carries; anything else came in via ``extra``.
_STANDARD_FIELDS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


class JsonLogFormatter(logging.Formatter):
    """Render LogRecords as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_FIELDS and not key.startswith("_")
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "module": record.name,
            "event": record.getMessage(),
            "data": data,
        }
        return json.dumps(payload, default=str, separators=(",", ":"))


def configure_logging(level: int | str = logging.INFO) -> None:
    """Route the ``lotfit`` logger tree to a JSON stream handler, once."""
    root = logging.getLogger("lotfit")
    if getattr(root, "_lotfit_json_logging", False):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter())

    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)
    root._lotfit_json_logging = True  # type: ignore[attr-defined]
