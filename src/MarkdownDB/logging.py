"""
Structured logging utilities for MarkdownDB builds.

Every stage logs through a :class:`StructuredLogger` so that console output is
one JSON object per line carrying the stage, the document identifier, and any
additional fields attached through ``child``. The CLI configures the level
once; library callers inherit whatever the host application configured.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LOGGER_NAME = "MarkdownDB"

__all__ = [
    "LOGGER_NAME",
    "JSONFormatter",
    "StructuredLogger",
    "get_logger",
    "log_event",
]


class JSONFormatter(logging.Formatter):
    """Formatter emitting one JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        """Render ``record`` as a JSON string with MarkdownDB-specific fields."""

        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "stage": getattr(record, "stage", None),
        }
        if hasattr(record, "extra_fields") and isinstance(record.extra_fields, dict):
            payload.update(record.extra_fields)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


class StructuredLogger(logging.LoggerAdapter):
    """Logger adapter that enriches structured logs with shared context."""

    def __init__(
        self, logger: logging.Logger, base_fields: Optional[Dict[str, Any]] = None
    ) -> None:
        """Store underlying logger and initial structured ``base_fields``."""

        super().__init__(logger, {})
        self.base_fields: Dict[str, Any] = dict(base_fields or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple[str, Dict[str, Any]]:
        """Merge adapter context into ``extra`` metadata for structured output."""

        extra = kwargs.setdefault("extra", {})
        fields = dict(self.base_fields)
        extra_fields = extra.get("extra_fields")
        if isinstance(extra_fields, dict):
            fields.update(extra_fields)
        extra["extra_fields"] = fields
        kwargs["extra"] = extra
        return msg, kwargs

    def child(self, **fields: object) -> "StructuredLogger":
        """Create a new adapter inheriting context with optional overrides."""

        merged = dict(self.base_fields)
        merged.update({k: v for k, v in fields.items() if v is not None})
        return StructuredLogger(self.logger, merged)


def get_logger(name: str = LOGGER_NAME, level: Optional[str] = None) -> StructuredLogger:
    """Get a structured JSON logger configured for console output.

    ``level`` is only applied when given so that library calls do not reset a
    level chosen by the CLI. Stage context is attached with
    :meth:`StructuredLogger.child` rather than on the shared adapter.
    """

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False
        if logger.level == logging.NOTSET:
            logger.setLevel(logging.INFO)
    if level is not None:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    adapter = getattr(logger, "_markdowndb_adapter", None)
    if not isinstance(adapter, StructuredLogger):
        adapter = StructuredLogger(logger)
        setattr(logger, "_markdowndb_adapter", adapter)
    return adapter


def log_event(logger: logging.LoggerAdapter | logging.Logger, level: str, message: str, **fields: object) -> None:
    """Emit a structured log record using the ``extra_fields`` convention."""

    normalised_level = str(level).lower()
    base_stage = getattr(logger, "base_fields", {}).get("stage") if hasattr(logger, "base_fields") else None
    if normalised_level in {"warning", "error"}:
        if "stage" not in fields:
            fields["stage"] = base_stage or "unknown"
        if "doc_id" not in fields:
            fields["doc_id"] = "unknown"
        error_code = fields.get("error_code")
        if not error_code:
            fields["error_code"] = "UNKNOWN"
        else:
            fields["error_code"] = str(error_code).upper()
    elif "stage" not in fields and base_stage is not None:
        fields["stage"] = base_stage

    emitter = getattr(logger, normalised_level, None)
    if not callable(emitter):
        raise AttributeError(f"Logger has no level '{level}'")
    emitter(message, extra={"extra_fields": fields})
