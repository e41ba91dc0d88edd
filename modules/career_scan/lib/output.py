from __future__ import annotations

import contextlib
import json
import os
from typing import Any

from .models import RunReport


def build_payload(report: RunReport) -> dict[str, Any]:
    """
    Result-file document:

        {"scrapedAt", "totalJobs", "totalScraped", "errors"?, "jobs"}

    "errors" is omitted when every source succeeded.
    """
    payload: dict[str, Any] = {
        "scrapedAt": report.scraped_at,
        "totalJobs": len(report.jobs),
        "totalScraped": len(report.scraped),
    }
    errors = report.errors
    if errors:
        payload["errors"] = errors
    payload["jobs"] = [j.to_dict() for j in report.jobs]
    return payload


def write_results(path: str, payload: dict[str, Any]) -> str:
    """Write the payload as indented UTF-8 JSON (atomic replace); returns the path."""
    d = os.path.dirname(os.path.abspath(path)) or "."
    os.makedirs(d, exist_ok=True)
    tmp = f"{path}.tmp"
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
            f.write("\n")
        os.replace(tmp, path)
    except Exception:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp)
        raise
    return path
