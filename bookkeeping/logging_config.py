"""
Structured JSON logging for the bookkeeping kernel.

Every record under the ``bookkeeping`` logger namespace renders as one JSON
object per line. Book operations bind ``book_id`` and ``operation`` into
LogContext, so each event carries the Book and call that produced it;
callers may add a ``correlation_id`` of their own.
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
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, is_dataclass
from datetime import UTC, datetime
from decimal import Decimal
from fractions import Fraction
from typing import Any

# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

_CONTEXT_FIELDS: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"bookkeeping_log_{name}", default=None)
    for name in ("correlation_id", "book_id", "operation")
}


class LogContext:
    """Call-scoped fields merged into every record: correlation_id, book_id, operation."""

    @staticmethod
    def _var(name: str) -> ContextVar[str | None]:
        try:
            return _CONTEXT_FIELDS[name]
        except KeyError:
            raise TypeError(f"Unknown log context field: {name}") from None

    @classmethod
    def set(cls, **fields: str | None) -> None:
        """Set context fields. None values leave the field as it is."""
        for name, value in fields.items():
            if value is not None:
                cls._var(name).set(value)

    @classmethod
    def get_all(cls) -> dict[str, str]:
        """The fields currently set, in declaration order."""
        return {
            name: value
            for name, var in _CONTEXT_FIELDS.items()
            if (value := var.get()) is not None
        }

    @classmethod
    def clear(cls) -> None:
        for var in _CONTEXT_FIELDS.values():
            var.set(None)

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[type["LogContext"]]:
        """Set fields for the duration of a ``with`` block, then restore them."""
        tokens = [
            (cls._var(name), cls._var(name).set(value))
            for name, value in fields.items()
            if value is not None
        ]
        try:
            yield cls
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# ---------------------------------------------------------------------------
# JSON rendering
# ---------------------------------------------------------------------------

# Attributes every LogRecord has; anything else on a record came from ``extra``.
_RECORD_ATTRIBUTES: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _to_json(obj: Any) -> Any:
    """``json.dumps`` fallback for amounts, timestamps and entity keys."""
    if isinstance(obj, (Decimal, Fraction)):
        return str(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    return str(obj)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    """Type, message, error code and structured attributes of an exception."""
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    fields.update(
        (f"exc_{name}", value)
        for name, value in vars(exc).items()
        if not name.startswith("_")
    )
    return fields


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per record.

    Keys, in order: ``ts``, ``level``, ``logger``, ``message``, the bound
    LogContext fields, the record's ``extra`` fields, and for records with
    exception info the ``exc_*`` fields plus ``traceback``. An ``extra`` key
    never overwrites an envelope or context key.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRIBUTES:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_to_json)


_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

_ROOT_LOGGER_NAME = "bookkeeping"

_setup_lock = threading.Lock()
_setup_done = False


def get_logger(name: str) -> logging.Logger:
    """Logger ``bookkeeping.<name>``."""
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
    structured: bool = True,
) -> None:
    """
    Attach one handler to the ``bookkeeping`` logger. Only the first call
    has any effect until ``reset_logging()``.

    Args:
        level: Threshold for the whole namespace.
        stream: Target of the default StreamHandler (stderr if omitted).
        handler: Use this handler instead of a StreamHandler.
        structured: JSON lines when True, plain text otherwise.
    """
    global _setup_done
    with _setup_lock:
        if _setup_done:
            return
        _setup_done = True

    target = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    target.setFormatter(
        StructuredFormatter() if structured else logging.Formatter(_PLAIN_FORMAT)
    )

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False
    root.addHandler(target)


def reset_logging() -> None:
    """Drop handlers and allow ``configure_logging`` again (test support)."""
    global _setup_done
    with _setup_lock:
        _setup_done = False
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
