# service/logging_utils.py
"""
JSON-lines activity/error logs for scrape runs.

One file per kind and day: <LOG_DIR>/<prefix>-YYYY-MM-DD.jsonl. Every record
gets a deep-redacted copy of the caller's dict plus `_meta` (host, pid).

Environment (read on every write, so tests and the CLI can redirect it):
  LOG_DIR                  default ./local/logs
  ACTIVITY_LOG_PREFIX      default "activity"
  ERROR_LOG_PREFIX         default "error"
  ACTIVITY_LOG_MAX_BYTES   roll the file over at this size; <=0 never
  LOG_DISABLE              "1" makes every write a no-op
"""

from __future__ import annotations

import datetime as _dt
import json
import os
import socket
from collections.abc import Iterable
from typing import Any

REDACTED = "***REDACTED***"

# Case-insensitive substrings of key names whose values never reach disk.
SENSITIVE_KEY_PARTS = frozenset({
    "password",
    "token",
    "apikey",
    "api_key",
    "secret",
    "authorization",
    "cookie",
    "proxy",
})

_HOST = socket.gethostname()


# ---- public API --------------------------------------------------------------


def write_activity_log(record: dict[str, Any]) -> None:
    """Append one activity record. Raises OSError/TypeError on failure; the input is not mutated."""
    if not _enabled():
        return
    _append(get_activity_log_path(), record)


def write_error_log(record: dict[str, Any]) -> None:
    if not _enabled():
        return
    _append(get_error_log_path(), record)


def get_activity_log_path() -> str:
    return _daily_path(os.getenv("ACTIVITY_LOG_PREFIX", "activity"))


def get_error_log_path() -> str:
    return _daily_path(os.getenv("ERROR_LOG_PREFIX", "error"))


def redact(record: dict[str, Any], keys: Iterable[str] | None = None) -> dict[str, Any]:
    """Deep copy of `record` with sensitive values (by key name) and bearer tokens scrubbed."""
    parts = tuple(k.lower() for k in (keys or SENSITIVE_KEY_PARTS))
    return _scrub(record, parts)


# ---- internals ---------------------------------------------------------------


def _enabled() -> bool:
    return os.getenv("LOG_DISABLE", "").strip() != "1"


def _daily_path(prefix: str) -> str:
    base = os.getenv("LOG_DIR") or os.path.join("local", "logs")
    return os.path.join(base, f"{prefix}-{_dt.date.today().isoformat()}.jsonl")


def _scrub(value: Any, parts: tuple[str, ...]) -> Any:
    if isinstance(value, dict):
        return {
            k: REDACTED if isinstance(k, str) and any(p in k.lower() for p in parts) else _scrub(v, parts)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(_scrub(v, parts) for v in value)
    if isinstance(value, str) and "bearer " in value.lower():
        scheme = value.split(" ", 1)[0]
        return f"{scheme} {REDACTED}"
    return value


def _roll_over(path: str) -> None:
    try:
        limit = int(os.getenv("ACTIVITY_LOG_MAX_BYTES", "0"))
    except ValueError:
        limit = 0
    if limit <= 0:
        return
    try:
        if os.path.getsize(path) < limit:
            return
        stamp = _dt.datetime.now().strftime("%Y%m%d-%H%M%S")
        os.replace(path, f"{path}.{stamp}")
    except FileNotFoundError:
        return


def _append(path: str, record: dict[str, Any]) -> None:
    doc = redact(record)
    meta = doc.get("_meta") if isinstance(doc.get("_meta"), dict) else {}
    doc["_meta"] = {**meta, "host": _HOST, "pid": os.getpid()}
    # Serialize before touching the file so a bad record leaves no partial line.
    line = (json.dumps(doc, ensure_ascii=False, separators=(",", ":"), default=str) + "\n").encode("utf-8")

    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    _roll_over(path)
    # O_APPEND keeps concurrent single-line writes whole.
    fd = os.open(path, os.O_CREAT | os.O_APPEND | os.O_WRONLY, 0o644)
    try:
        os.write(fd, line)
    finally:
        os.close(fd)
