"""Structured JSON logging for the payroll kernel."""

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
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from typing import Any

# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

# Fields a payroll operation stamps on every line it logs.
_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"payroll_log_{name}", default=None)
    for name in ("correlation_id", "actor_id", "employee_id", "period")
}


class LogContext:
    """Request-scoped log fields (who is acting, on which employee and period)."""

    @staticmethod
    def get_all() -> dict[str, str]:
        """Non-None context fields in declaration order."""
        return {
            name: value
            for name, var in _CONTEXT_VARS.items()
            if (value := var.get()) is not None
        }

    @staticmethod
    def clear() -> None:
        for var in _CONTEXT_VARS.values():
            var.set(None)

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[type["LogContext"]]:
        """
        Set fields for the duration of the block and restore them on exit.

        None values leave the field as it is.  Unknown field names raise
        ``ValueError``.
        """
        unknown = set(fields) - set(_CONTEXT_VARS)
        if unknown:
            raise ValueError(f"Unknown log context fields: {sorted(unknown)}")

        tokens = [
            (_CONTEXT_VARS[name], _CONTEXT_VARS[name].set(value))
            for name, value in fields.items()
            if value is not None
        ]
        try:
            yield LogContext
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# ---------------------------------------------------------------------------
# JSON Formatter
# ---------------------------------------------------------------------------

_STDLIB_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    return str(obj)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    """Type, message, and the public attributes of a PayrollKernelError."""
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    if hasattr(exc, "code"):
        fields["exc_code"] = exc.code
    for key, value in vars(exc).items():
        if not key.startswith("_") and key not in ("args", "code"):
            fields[f"exc_{key}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, context, extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _STDLIB_KEYS and key not in payload
        )

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


# ---------------------------------------------------------------------------
# Logger factory and setup
# ---------------------------------------------------------------------------

_ROOT_LOGGER = "payroll_kernel"

_configured = False
_lock = threading.Lock()


def get_logger(name: str) -> logging.Logger:
    """Logger ``payroll_kernel.<name>``."""
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach one JSON handler to the ``payroll_kernel`` logger.  Later calls are no-ops."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root = logging.getLogger(_ROOT_LOGGER)
    root.setLevel(level)
    root.propagate = False

    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)


def reset_logging() -> None:
    """Drop handlers and allow ``configure_logging`` to run again (tests)."""
    global _configured
    with _lock:
        _configured = False
    root = logging.getLogger(_ROOT_LOGGER)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
