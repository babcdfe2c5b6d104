"""
Structured JSON logging for the stock kernel.

Every record under the ``stock_kernel`` logger namespace is written as one
JSON object per line.  Ledger operations bind ``unit_id``, ``operation``
and ``actor_id`` through LogContext so that every line they emit, at any
depth, carries them without threading the values through call signatures.

Usage::

    configure_logging(level="INFO")
    log = get_logger("services.checkout")
    with LogContext.bind(unit_id="HSA0001", operation="checkout_manual"):
        log.info("checkout_completed", extra={"mode": "manual"})
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
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, Iterator
from uuid import UUID

LOGGER_NAMESPACE = "stock_kernel"

# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

_CONTEXT_FIELDS = ("correlation_id", "actor_id", "unit_id", "operation")

_context: ContextVar[dict[str, str]] = ContextVar("stock_log_context", default={})


class LogContext:
    """
    Per-thread / per-task log fields.

    The fields live in one ContextVar holding an immutable snapshot; every
    change installs a new dict, so a bound scope never leaks into a
    sibling thread or task.
    """

    FIELDS = _CONTEXT_FIELDS

    @staticmethod
    def _merge(values: dict[str, str | None]) -> dict[str, str]:
        unknown = set(values) - set(_CONTEXT_FIELDS)
        if unknown:
            raise TypeError(f"Unknown log context field(s): {', '.join(sorted(unknown))}")
        merged = dict(_context.get())
        merged.update({k: v for k, v in values.items() if v is not None})
        return merged

    @classmethod
    def set(cls, **values: str | None) -> None:
        """Set fields for the rest of the current context.  None leaves a field as is."""
        _context.set(cls._merge(values))

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_context.get())

    @classmethod
    def clear(cls) -> None:
        _context.set({})

    @classmethod
    @contextmanager
    def bind(cls, **values: str | None) -> Iterator[type["LogContext"]]:
        """Set fields inside a ``with`` block and restore the previous ones after."""
        token = _context.set(cls._merge(values))
        try:
            yield cls
        finally:
            _context.reset(token)


# ---------------------------------------------------------------------------
# JSON Formatter
# ---------------------------------------------------------------------------

# Attributes every LogRecord has; anything else came in through ``extra``
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


def _json_default(value: Any) -> Any:
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "to_record"):
        return value.to_record()
    return str(value)


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per record.

    Keys, in order: ``ts``, ``level``, ``logger``, ``message``, the bound
    LogContext fields, then the record's ``extra``.  With ``exc_info`` the
    exception adds ``exc_type``, ``exc_message``, ``exc_code`` for kernel
    errors, one ``exc_<attr>`` per public attribute, and ``traceback``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                entry.setdefault(key, value)
        if record.exc_info and record.exc_info[1] is not None:
            entry.update(self._exception_fields(record.exc_info[1]))
            entry["traceback"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=_json_default)

    @staticmethod
    def _exception_fields(exc: BaseException) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        code = getattr(exc, "code", None)
        if code is not None:
            fields["exc_code"] = code
        for name, value in vars(exc).items():
            if not name.startswith("_"):
                fields[f"exc_{name}"] = value
        return fields


# ---------------------------------------------------------------------------
# Logger factory and setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """``get_logger("services.intake")`` -> ``stock_kernel.services.intake``."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


_setup_lock = threading.Lock()
_handler: logging.Handler | None = None


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the ``stock_kernel`` logger.

    Only the first call has an effect until reset_logging().  ``handler``
    wins over ``stream``; with neither, records go to stderr.
    """
    global _handler
    with _setup_lock:
        if _handler is not None:
            return
        _handler = handler or logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(StructuredFormatter())

        namespace = logging.getLogger(LOGGER_NAMESPACE)
        namespace.setLevel(level)
        namespace.propagate = False
        namespace.addHandler(_handler)


def reset_logging() -> None:
    """Detach every handler and forget configure_logging().  Tests only."""
    global _handler
    with _setup_lock:
        _handler = None
        namespace = logging.getLogger(LOGGER_NAMESPACE)
        for attached in list(namespace.handlers):
            namespace.removeHandler(attached)
        namespace.setLevel(logging.WARNING)
