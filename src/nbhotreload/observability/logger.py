"""Structured JSON logger for nbhotreload.

Every log record is emitted as a single-line JSON object::

    {"ts": "2026-10-18T12:00:00.123456+00:00", "level": "INFO",
     "logger": "nbhotreload.orchestrator", "message": "reload applied",
     "location": "/work/analysis.ipynb", "start": 2, "old_end": 3,
     "new_end": 4}

Usage::

    from nbhotreload.observability import document_logger, get_logger

    log = get_logger("nbhotreload.poller")
    log.info("tick", extra={"extra_fields": {"watched": 3}})

    doc_log = document_logger(log, "/work/analysis.ipynb")
    doc_log.debug("baseline primed")   # carries "location"

Payload values are made JSON-safe: raw bytes (decoded image outputs) are
replaced by their length, enums by their value, dataclasses such as
:class:`~nbhotreload.models.ReplaceRange` by their fields.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import sys
from collections.abc import MutableMapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts``, ``level``, ``logger`` and ``message``.
    Fields passed via ``extra={"extra_fields": {...}}`` are merged into the
    top-level object, and ``exception`` / ``stack_info`` are added when
    present on the record.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=_json_default)


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return str(value)


# One handler per logger name so that ``get_logger`` is idempotent.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "nbhotreload",
    *,
    level: int | str = logging.DEBUG,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Parameters
    ----------
    name:
        Logger name.  Defaults to ``"nbhotreload"``.
    level:
        Minimum log level, as an ``int`` or a case-insensitive name.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        A logger with a :class:`StructuredFormatter` handler attached.
        Repeated calls with the same *name* do **not** add handlers.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        resolved_level = (
            logging.getLevelName(level.upper())
            if isinstance(level, str)
            else level
        )
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)

        # Avoid duplicates when the root logger also has handlers.
        logger.propagate = False

        _configured_loggers.add(name)

    return logger


class DocumentLogger(logging.LoggerAdapter):
    """Logger adapter that tags every record with one document's location.

    Per-call ``extra_fields`` are merged over the bound fields.
    """

    def __init__(self, logger: logging.Logger, location: str, **fields: Any) -> None:
        super().__init__(logger, {"location": location, **fields})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any],
    ) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["extra_fields"] = {**self.extra, **extra.get("extra_fields", {})}
        kwargs["extra"] = extra
        return msg, kwargs


def document_logger(logger: logging.Logger, location: str, **fields: Any) -> DocumentLogger:
    """Bind *location* (and any *fields*) to every record logged through *logger*."""
    return DocumentLogger(logger, location, **fields)
