"""Structured event logging for fsio."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .constants import LOGGER_NAME

_EVENT_KEY_ORDER = ["ts_utc", "level", "logger"]


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace(
        "+00:00", "Z"
    )


def _to_log_safe(value: Any) -> Any:
    """Convert values to JSON-serializable, log-safe representations."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _to_log_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_log_safe(v) for v in value]
    return str(value)


def log_event(
    event: str,
    level: int = logging.INFO,
    *,
    logger: logging.Logger | None = None,
    **fields: Any,
) -> None:
    """Emit a structured log event as a single JSON message."""
    target_logger = logger or logging.getLogger(LOGGER_NAME)
    if not target_logger.isEnabledFor(level):
        return

    payload: dict[str, Any] = {"event": event}
    for key, value in fields.items():
        payload[key] = _to_log_safe(value)
    target_logger.log(level, json.dumps(payload, ensure_ascii=False, separators=(",", ":")))


class StructuredTextFormatter(logging.Formatter):
    """Format log records as human-readable structured blocks."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._first_entry = True

    @staticmethod
    def _format_value(value: Any) -> str:
        return str(value).replace("\n", "\\n")

    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, Any] = {
            "ts_utc": _utc_now_iso(),
            "level": record.levelname,
            "logger": record.name,
        }

        message = record.getMessage()
        parsed = None
        if message.startswith("{") and message.endswith("}"):
            try:
                parsed = json.loads(message)
            except json.JSONDecodeError:
                parsed = None

        if isinstance(parsed, dict):
            base.update(parsed)
        else:
            base["event"] = record.name
            base["message"] = message

        event_name = str(base.pop("event", record.name))
        lines = [f"=== {event_name} ==="]

        preferred = [k for k in _EVENT_KEY_ORDER if base.get(k) is not None]
        remaining = sorted(k for k in base if k not in _EVENT_KEY_ORDER and base[k] is not None)
        for key in preferred + remaining:
            lines.append(f"{key}: {self._format_value(base[key])}")

        if record.exc_info:
            lines.append("traceback:")
            lines.append(self.formatException(record.exc_info))

        body = "\n".join(lines)
        if self._first_entry:
            self._first_entry = False
            return body
        return "\n" + body


def setup_logging(log_file: str | Path | None = None, level: int = logging.INFO) -> logging.Handler | None:
    """Attach a structured file handler to the ``fsio`` logger.

    Returns the installed handler, or None when no log file is given.
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    if not log_file:
        return None

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(str(log_path), encoding="utf-8")
    handler.setFormatter(StructuredTextFormatter())
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler
