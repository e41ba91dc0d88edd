from __future__ import annotations

from typing import Any

from .lib.config import Settings
from .lib.engine import run_once as _run_engine
from .lib.engine import summary_message
from .lib.logging_bridge import activity as log_activity
from .lib.output import build_payload, write_results


def run(**kwargs: Any) -> tuple[str, dict]:
    """
    Entry point for the 'career_scan' module.

    Accepts kwargs (see Settings.from_env_and_kwargs), including:
      companies_path: str = "config/companies.json"
      output_path: str = "output/jobs.json"
      headless: bool = True
      render_js: bool = True      # False: plain HTTP fetch, no JavaScript
      apply_filters: bool = True
      browser_factory: callable   # test hook, (Settings) -> browser control

    Returns:
      (message: str, meta: dict) where meta carries the written payload,
      the output path and the filter statistics.

    Raises ConfigError (nothing scraped, nothing written) when the companies
    file yields no usable source.
    """
    browser_factory = kwargs.pop("browser_factory", None)
    settings = Settings.from_env_and_kwargs(kwargs)

    log_activity({
        "component": "career_scan.main",
        "op": "start",
        "companies_path": settings.companies_path,
        "output_path": settings.output_path,
        "sources": len(settings.sources()),
    })

    report = _run_engine(settings, browser_factory=browser_factory)
    payload = build_payload(report)
    path = write_results(settings.output_path, payload)

    msg = summary_message(report)
    meta = {
        "message": msg,
        "output_path": path,
        "payload": payload,
        "results": [
            {"company": r.company, "success": r.success, "found": len(r.jobs), "error": r.error}
            for r in report.results
        ],
        "stats": report.stats.to_dict() if report.stats else None,
    }

    log_activity({
        "component": "career_scan.main",
        "op": "written",
        "output_path": path,
        "total_jobs": payload["totalJobs"],
        "total_scraped": payload["totalScraped"],
    })
    return msg, meta
