"""
Animica — ledger.logging
------------------------

Structured logging for the asset ledger:
- JSON or concise text formats
- Context-local fields via `contextvars` (trace_id, source, caller, ...)
- Safe value coercion (bytes → hex, dataclasses → dicts)
- `with_fields` adapters for constant per-instance fields

Usage
-----
    from ledger import logging as llog

    llog.configure(json=False, level="DEBUG")  # once, in the host
    log = llog.get_logger(__name__)

    with llog.trace_scope():
        llog.bind(caller="alice")
        log.info("asset created", extra={"asset_id": 0})

The ledger itself never configures handlers; it only emits records. Hosts (and
the replay CLI) call `configure()`.
"""

from __future__ import annotations

import datetime as _dt
import io
import json
import logging
import os
import sys
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Iterator, Optional, Tuple

# ----------------------------
# Context
# ----------------------------

_LOG_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar("_LEDGER_LOG_CONTEXT", default={})

DEFAULT_CONTEXT_KEYS = (
    "trace_id",
    "component",
    "source",
    "caller",
    "asset_id",
)

# LogRecord attributes that are never treated as structured extras.
_RESERVED = frozenset(
    (
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
    )
)


def context() -> Dict[str, Any]:
    """Return a *copy* of the active logging context."""
    return dict(_LOG_CONTEXT.get())


def bind(**fields: Any) -> None:
    """Merge fields into the active context."""
    cur = dict(_LOG_CONTEXT.get())
    cur.update({k: _coerce_value(v) for k, v in fields.items()})
    _LOG_CONTEXT.set(cur)


def unbind(*keys: str) -> None:
    cur = dict(_LOG_CONTEXT.get())
    for k in keys:
        cur.pop(k, None)
    _LOG_CONTEXT.set(cur)


def clear_context() -> None:
    _LOG_CONTEXT.set({})


def short_uuid() -> str:
    return uuid.uuid4().hex[:12]


@contextmanager
def trace_scope(trace_id: Optional[str] = None) -> Iterator[str]:
    """
    Ensure a trace_id is bound for the duration of the scope; restores the
    prior context on exit. Yields the trace id in use.
    """
    prev = dict(_LOG_CONTEXT.get())
    tid = trace_id or short_uuid()
    try:
        bind(trace_id=tid)
        yield tid
    finally:
        _LOG_CONTEXT.set(prev)


# ----------------------------
# Formatters
# ----------------------------

_LEVEL_TO_INT = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


def _coerce_value(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    if isinstance(v, _dt.datetime):
        if v.tzinfo is None:
            v = v.replace(tzinfo=_dt.timezone.utc)
        return v.isoformat()
    if is_dataclass(v) and not isinstance(v, type):
        return asdict(v)
    return str(v)


def _utcnow_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="milliseconds")


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in record.__dict__.items():
        if k.startswith("_") or k in _RESERVED:
            continue
        out[k] = _coerce_value(v)
    return out


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _utcnow_iso(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(context())
        for k, v in _extras(record).items():
            payload.setdefault(k, v)
        if record.exc_info:
            payload["err"] = "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return json.dumps(payload, default=str, separators=(",", ":"))


class TextFormatter(logging.Formatter):
    """
    One-liner:
      2025-01-05T12:34:56.789+00:00 | INFO  | ledger.runtime.assets | trace_id=abc123 asset_id=0 | asset created
    """

    def format(self, record: logging.LogRecord) -> str:
        fields = context()
        for k, v in _extras(record).items():
            fields.setdefault(k, v)
        ordered = [k for k in DEFAULT_CONTEXT_KEYS if k in fields]
        ordered += sorted(k for k in fields if k not in DEFAULT_CONTEXT_KEYS)
        kv = " ".join(f"{k}={fields[k]}" for k in ordered)

        line = f"{_utcnow_iso()} | {record.levelname:<5} | {record.name}"
        if kv:
            line += f" | {kv}"
        line += f" | {record.getMessage()}"
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return line


# ----------------------------
# Public setup API
# ----------------------------


def configure(
    *,
    json: Optional[bool] = None,
    level: Optional[str | int] = None,
    stream: Optional[io.TextIOBase] = None,
    logger_name: str = "ledger",
) -> logging.Logger:
    """
    Attach one console handler to the `ledger` logger tree.

    Parameters
    ----------
    json : bool | None
        If None, chosen by env ANIMICA_LOG_FORMAT=(json|text); text otherwise.
    level : str | int
        Minimum level; env ANIMICA_LOG_LEVEL (default INFO) when None.
    stream : TextIO
        Destination stream (default: the current sys.stderr).
    logger_name : str
        Logger to configure (default: the package logger, not the root).
    """
    chosen_json = _decide_json(json)
    lvl = _coerce_level(level or os.environ.get("ANIMICA_LOG_LEVEL", "INFO"))

    logger = logging.getLogger(logger_name)
    logger.setLevel(lvl)
    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(lvl)
    handler.setFormatter(JSONFormatter() if chosen_json else TextFormatter())
    logger.addHandler(handler)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "ledger")


def with_fields(logger: logging.Logger, **fields: Any) -> "ContextAdapter":
    """Return a logger adapter that injects constant fields on each call."""
    return ContextAdapter(logger, extra={k: _coerce_value(v) for k, v in fields.items()})


class ContextAdapter(logging.LoggerAdapter):
    """
    LoggerAdapter that merges the adapter's constant fields with call-site
    `extra={...}` (call site wins).
    """

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        extra = kwargs.get("extra") or {}
        merged = {**self.extra, **{k: _coerce_value(v) for k, v in extra.items()}}
        kwargs["extra"] = merged
        return msg, kwargs


# ----------------------------
# Internals
# ----------------------------


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return _LEVEL_TO_INT.get(level.strip().upper(), logging.INFO)


def _decide_json(json_flag: Optional[bool]) -> bool:
    if json_flag is not None:
        return json_flag
    env = os.environ.get("ANIMICA_LOG_FORMAT", "").strip().lower()
    return env == "json"


__all__ = [
    "DEFAULT_CONTEXT_KEYS",
    "context",
    "bind",
    "unbind",
    "clear_context",
    "trace_scope",
    "short_uuid",
    "JSONFormatter",
    "TextFormatter",
    "configure",
    "get_logger",
    "with_fields",
    "ContextAdapter",
]
