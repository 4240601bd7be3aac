"""Structured run events.

Every event is a flat record handed to an optional in-process callback and,
when `REGTEST_EVENT_LOG` names a file, appended to it as one JSON line.
`REGTEST_EVENT_LEVEL` drops file records below the given level; the callback
always sees everything.
"""

from __future__ import annotations

import json
import os
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from pathlib import Path

type LogRecord = dict[str, object]
type LogCallback = Callable[[LogRecord], object]


_LOG_FIELDS: ContextVar[LogRecord] = ContextVar("regtest_log_fields", default={})
_LOG_CALLBACK: ContextVar[LogCallback | None] = ContextVar(
    "regtest_log_callback",
    default=None,
)
_FILE_LOCK = threading.Lock()
DEFAULT_COMPONENT = "regtest"
EVENT_LOG_ENV = "REGTEST_EVENT_LOG"
EVENT_LEVEL_ENV = "REGTEST_EVENT_LEVEL"
LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40}


@contextmanager
def log_fields(**fields: object) -> Iterator[None]:
    """Attach fields to every event logged inside the block; None unbinds."""
    merged = {**_LOG_FIELDS.get(), **fields}
    token = _LOG_FIELDS.set({key: value for key, value in merged.items() if value is not None})
    try:
        yield
    finally:
        _LOG_FIELDS.reset(token)


@contextmanager
def log_callback(callback: LogCallback) -> Iterator[None]:
    token = _LOG_CALLBACK.set(callback)
    try:
        yield
    finally:
        _LOG_CALLBACK.reset(token)


def level_enabled(level: str) -> bool:
    threshold = (os.environ.get(EVENT_LEVEL_ENV) or "").strip().lower()
    if threshold not in LEVELS:
        return True
    return LEVELS.get(level, LEVELS["info"]) >= LEVELS[threshold]


def append_record(target: Path, record: LogRecord) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    line = json.dumps(record, ensure_ascii=False, default=str)
    with _FILE_LOCK:
        with target.open("a", encoding="utf-8") as handle:
            _ = handle.write(line + "\n")


def log_event(
    *,
    component: str | None = None,
    event: str = "log",
    message: str = "",
    level: str = "info",
    **fields: object,
) -> LogRecord:
    record: LogRecord = {
        "ts": datetime.now(UTC).isoformat(),
        "component": (component or "").strip() or DEFAULT_COMPONENT,
        "event": event,
        "level": level,
        "message": message,
        **_LOG_FIELDS.get(),
    }
    record.update({key: value for key, value in fields.items() if value is not None})

    callback = _LOG_CALLBACK.get()
    if callback is not None:
        try:
            _ = callback(record)
        except Exception:
            # a broken observer must not change a test run's outcome
            pass

    raw_target = (os.environ.get(EVENT_LOG_ENV) or "").strip()
    if raw_target and level_enabled(level):
        append_record(Path(raw_target), record)
    return record
