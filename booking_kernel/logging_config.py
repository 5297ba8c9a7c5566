"""
booking_kernel.logging_config -- JSON log lines for booking transitions.

Every booking component logs through ``get_logger(name)``, which hangs off
the ``booking_kernel`` logger.  Records are rendered one JSON object per
line: a fixed envelope (ts, level, logger, message), then the bound
booking context, then the ``extra`` fields of the call.

Booking context (booking id, acting party, caller correlation id) is held
in a ContextVar so that a transition logged deep inside an engine still
carries the booking it belongs to.  ``LogContext.bind`` scopes it to a
``with`` block; the lifecycle manager binds it around each commit.

Domain values (Decimal amounts, ``str`` enums such as BookingState,
timestamps and SLA durations) are rendered as JSON scalars.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any
from uuid import UUID

_LOGGER_PREFIX = "booking_kernel"

CONTEXT_FIELDS = ("correlation_id", "booking_id", "actor_id")

_EMPTY: Mapping[str, str] = MappingProxyType({})
_context: ContextVar[Mapping[str, str]] = ContextVar("booking_log_context", default=_EMPTY)


class LogContext:
    """Booking fields attached to every record logged in the current context."""

    @staticmethod
    def _check(fields: dict[str, str | None]) -> dict[str, str]:
        unknown = set(fields) - set(CONTEXT_FIELDS)
        if unknown:
            raise TypeError(f"Unknown log context fields: {', '.join(sorted(unknown))}")
        return {k: v for k, v in fields.items() if v is not None}

    @classmethod
    def set(cls, **fields: str | None) -> None:
        """Merge fields into the current context.  ``None`` values are ignored."""
        _context.set(MappingProxyType({**_context.get(), **cls._check(fields)}))

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_context.get())

    @classmethod
    def clear(cls) -> None:
        _context.set(_EMPTY)

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[None]:
        """Scope fields to a ``with`` block; the previous context is restored."""
        token = _context.set(MappingProxyType({**_context.get(), **cls._check(fields)}))
        try:
            yield
        finally:
            _context.reset(token)


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        # Money stays exact.
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, UUID):
        return str(value)
    return str(value)


# Attributes every LogRecord carries; anything else came from ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "taskName"}


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
        # Kernel errors carry their context (from_state, booking_id, ...)
        # as public attributes.
        for name, value in vars(exc).items():
            if not name.startswith("_"):
                fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """Render a record as one JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context.get(),
        }
        payload.update(
            (k, v) for k, v in vars(record).items()
            if k not in _RECORD_ATTRS and k not in payload
        )
        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_json_default)


def get_logger(name: str) -> logging.Logger:
    """Logger for a booking component, e.g. ``get_logger("services.lifecycle")``."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def _structured_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if isinstance(h.formatter, StructuredFormatter)]


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach a JSON handler to the ``booking_kernel`` logger.

    Calling again once a JSON handler is attached does nothing.
    """
    root = logging.getLogger(_LOGGER_PREFIX)
    if _structured_handlers(root):
        return
    target = handler or logging.StreamHandler(stream or sys.stderr)
    target.setFormatter(StructuredFormatter())
    root.setLevel(level)
    root.propagate = False
    root.addHandler(target)


def reset_logging() -> None:
    """Detach JSON handlers so ``configure_logging`` can run again."""
    root = logging.getLogger(_LOGGER_PREFIX)
    for h in _structured_handlers(root):
        root.removeHandler(h)
    root.setLevel(logging.WARNING)
