"""
Structured logging helpers for dataset scans.

Scans emit JSON (or plain console) log lines that carry structured fields such
as the shard index, the requested range, and per-scan counters. Fields travel
through the ``extra_fields`` attribute of each record so any handler can pick
them up.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .shards import ShardHandle

__all__ = [
    "JSONFormatter",
    "ConsoleFormatter",
    "StructuredLogger",
    "get_logger",
    "log_event",
]


class JSONFormatter(logging.Formatter):
    """Formatter emitting one JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        """Render ``record`` as a JSON string including its structured fields."""

        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "extra_fields") and isinstance(record.extra_fields, dict):
            payload.update(record.extra_fields)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter appending structured fields as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = getattr(record, "extra_fields", None)
        if isinstance(fields, dict) and fields:
            rendered = " ".join(f"{key}={value}" for key, value in fields.items())
            line = f"{line} [{rendered}]"
        return line


class StructuredLogger(logging.LoggerAdapter):
    """
    Adapter that stamps dataset context onto every record it emits.

    Context lives in the adapter's ``extra`` mapping and is merged under the
    per-call ``extra_fields``, so call-site fields win on key clashes.
    """

    def __init__(
        self, logger: logging.Logger, context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(logger, {k: v for k, v in (context or {}).items() if v is not None})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple[str, Dict[str, Any]]:
        call_extra = kwargs.get("extra") or {}
        call_fields = call_extra.get("extra_fields")
        merged = dict(self.extra)
        if isinstance(call_fields, dict):
            merged.update(call_fields)
        kwargs["extra"] = {**call_extra, "extra_fields": merged}
        return msg, kwargs

    def bind(self, **fields: object) -> "StructuredLogger":
        """Add persistent context in place; ``None`` values are ignored."""

        self.extra.update({k: v for k, v in fields.items() if v is not None})
        return self

    def for_shard(self, handle: ShardHandle) -> "StructuredLogger":
        """Return a new adapter whose records name ``handle``'s position and path."""

        context = dict(self.extra)
        context.update(shard_index=handle.index, path=str(handle.path))
        return StructuredLogger(self.logger, context)


def get_logger(
    name: str,
    level: str = "INFO",
    *,
    log_format: str = "json",
    base_fields: Optional[Dict[str, Any]] = None,
) -> StructuredLogger:
    """
    Configure the ``name`` logger for stderr output and return its adapter.

    Repeated calls reuse the single installed handler and only swap its
    formatter and level, so the CLI can reconfigure logging per invocation.
    """

    logger = logging.getLogger(name)
    handler = next(
        (h for h in logger.handlers if getattr(h, "_vectorbench_handler", False)), None
    )
    if handler is None:
        handler = logging.StreamHandler()
        handler._vectorbench_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
        logger.propagate = False
    use_console = str(log_format).lower() == "console"
    handler.setFormatter(ConsoleFormatter() if use_console else JSONFormatter())
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    adapter = getattr(logger, "_vectorbench_adapter", None)
    if not isinstance(adapter, StructuredLogger):
        adapter = StructuredLogger(logger, base_fields)
        logger._vectorbench_adapter = adapter  # type: ignore[attr-defined]
    elif base_fields:
        adapter.bind(**base_fields)
    return adapter


def log_event(
    logger: logging.Logger | logging.LoggerAdapter, level: str, message: str, **fields: object
) -> None:
    """Emit a structured log record using the ``extra_fields`` convention."""

    normalised_level = str(level).lower()
    if normalised_level in {"warning", "error"}:
        error_code = fields.get("error_code")
        fields["error_code"] = str(error_code).upper() if error_code else "UNKNOWN"

    emitter = getattr(logger, normalised_level, None)
    if not callable(emitter):
        raise AttributeError(f"Logger has no level '{level}'")
    emitter(message, extra={"extra_fields": fields})
