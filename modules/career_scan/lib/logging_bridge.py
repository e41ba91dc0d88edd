from __future__ import annotations

import copy
import logging
from typing import Any

from service import logging_utils as _backend

# Keys that should be redacted from structured logs
_REDACT_KEYS = {
    "password",
    "token",
    "apikey",
    "api_key",
    "secret",
    "authorization",
    "auth",
    "bearer",
    "cookie",
}


def _redact_record(record: dict[str, Any]) -> dict[str, Any]:
    """
    Shallow-copy record and redact obvious secret-like fields at top level.
    The JSONL backend applies its own deep redaction on top of this.
    """
    redacted = copy.copy(record)
    for k in list(redacted.keys()):
        lk = str(k).lower()
        if lk in _REDACT_KEYS or lk.endswith("_secret"):
            redacted[k] = "***REDACTED***"
    return redacted


def activity(record: dict[str, Any]) -> None:
    """
    Write an activity record to the JSONL activity log.
    Falls back to stdlib logging as structured info if the write fails.
    """
    payload = _redact_record(record)
    try:
        _backend.write_activity_log(payload)
        return
    except OSError:
        logging.getLogger("career_scan.activity").debug("activity log write failed", exc_info=True)
    logging.getLogger("career_scan.activity").info(payload)


def warning(record: dict[str, Any]) -> None:
    """
    Activity record flagged as a warning; also surfaced on the stdlib logger
    so it shows up on the console during interactive runs.
    """
    payload = {**record, "level": "warning"}
    logging.getLogger("career_scan.activity").warning(_redact_record(payload))
    activity(payload)


def error(record: dict[str, Any]) -> None:
    """
    Write an error record to the JSONL error log.
    Falls back to stdlib logging as structured error if the write fails.
    """
    payload = _redact_record(record)
    try:
        _backend.write_error_log(payload)
        return
    except OSError:
        logging.getLogger("career_scan.error").debug("error log write failed", exc_info=True)
    logging.getLogger("career_scan.error").error(payload)
