"""Centralized logging for keylimiter."""

from __future__ import annotations

import logging
import sys
import threading
from typing import Any, Protocol, runtime_checkable

_lock = threading.Lock()
_setup_done = False


class _Formatter(logging.Formatter):
    """Format log records as ``[tag] message k=v``, stripping the ``keylimiter.`` prefix."""

    def format(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith("keylimiter."):
            name = name[len("keylimiter.") :]
        fields = getattr(record, "fields", None)
        msg = f"[{name}] {record.msg}"
        if fields:
            msg += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        original = record.msg
        record.msg = msg
        try:
            return super().format(record)
        finally:
            record.msg = original


def setup_logging(verbose: bool = False) -> None:
    """Configure the ``keylimiter`` root logger (idempotent).

    Attaches a single ``StreamHandler(sys.stderr)`` with level WARNING
    (or DEBUG when *verbose* is True). Sets ``propagate = False`` so
    messages don't bubble to the root logger.
    """
    global _setup_done
    with _lock:
        logger = logging.getLogger("keylimiter")
        if _setup_done:
            if verbose:
                logger.setLevel(logging.DEBUG)
            return
        logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(_Formatter())
        logger.addHandler(handler)
        logger.propagate = False
        _setup_done = True


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(f"keylimiter.{name}")``.

    Lazily calls :func:`setup_logging` on first use so that log output
    is routed to stderr even when callers skip explicit setup.
    """
    setup_logging()
    return logging.getLogger(f"keylimiter.{name}")


@runtime_checkable
class Logger(Protocol):
    """Diagnostic sink accepted by :func:`keylimiter.options.with_logger`."""

    def bind(self, **fields: Any) -> Logger: ...

    def debug(self, msg: str, **fields: Any) -> None: ...

    def info(self, msg: str, **fields: Any) -> None: ...

    def error(self, msg: str, **fields: Any) -> None: ...


class BoundLogger:
    """Stdlib logger carrying a fixed set of structured fields."""

    def __init__(self, logger: logging.Logger, fields: dict[str, Any] | None = None) -> None:
        self._logger = logger
        self._fields: dict[str, Any] = dict(fields or {})

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self._fields)

    def bind(self, **fields: Any) -> BoundLogger:
        return BoundLogger(self._logger, {**self._fields, **fields})

    def _log(self, level: int, msg: str, fields: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, msg, extra={"fields": {**self._fields, **fields}})

    def debug(self, msg: str, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, fields)

    def info(self, msg: str, **fields: Any) -> None:
        self._log(logging.INFO, msg, fields)

    def error(self, msg: str, **fields: Any) -> None:
        self._log(logging.ERROR, msg, fields)
