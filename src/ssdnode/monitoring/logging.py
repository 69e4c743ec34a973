from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

_LOGGER_PREFIX = "ssdnode."
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
_TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are chatty at DEBUG (weights download, config merge).
_NOISY_LOGGERS = ("urllib3", "dynaconf")


def _component(logger_name: str) -> str:
    if logger_name.startswith(_LOGGER_PREFIX):
        return logger_name[len(_LOGGER_PREFIX):]
    return logger_name


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    ``extra={"context": {...}}`` on a log call is merged into the top level,
    so per-frame fields like ``source`` or ``detections`` stay queryable.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "component": _component(record.name),
            "message": record.getMessage(),
        }
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            payload.update(context)
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def _build_formatter(json_logs: bool) -> logging.Formatter:
    if json_logs:
        return JsonFormatter()
    return logging.Formatter(fmt=_TEXT_FORMAT, datefmt=_TEXT_DATEFMT)


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    handler = logging.StreamHandler()
    handler.setFormatter(_build_formatter(json_logs))
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))
