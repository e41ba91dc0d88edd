from __future__ import annotations

import os
import re
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlsplit


def truthy(v: Any) -> bool:
    """
    Normalize common truthy inputs from env/kwargs.
    Accepts bools or strings like: '1', 'true', 'yes', 'on'.
    """
    if isinstance(v, bool):
        return v
    if v is None:
        return False
    if isinstance(v, (int, float)):
        return v != 0
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "on", "y", "t"}


def now_iso() -> str:
    """
    UTC ISO-8601 timestamp with 'Z' suffix.
    """
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def getenv_str(name: str, default: str | None = None) -> str | None:
    """
    Typed wrapper for environment access.
    """
    val = os.getenv(name)
    return val if val is not None else default


def origin_of(url: str) -> str:
    """'https://jobs.acme.com/en/list?page=2' -> 'https://jobs.acme.com'"""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def slugify(s: str) -> str:
    s = re.sub(r"[^0-9a-zA-Z]+", "_", s.lower())
    return re.sub(r"_{2,}", "_", s).strip("_")
