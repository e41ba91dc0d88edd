"""
Engine for scraping configured career pages, classifying and filtering postings.

Features:
  - Strictly sequential visits, one browsing context at a time
  - Per-source failure isolation (one bad site never aborts the run)
  - Politeness delay between sources
  - Filter/dedup stage with per-criterion statistics
  - Dependency injection for testability (`browser_factory`)
  - Structured logging via `logging_bridge`
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence

from . import logging_bridge
from .browser import BrowserControl, open_browser
from .config import Settings, SourceConfig
from .filters import filter_jobs, filter_stats
from .models import JobPosting, RunReport, ScrapeResult
from .session import scrape_source
from .utils import now_iso

BrowserFactory = Callable[[Settings], BrowserControl]


# =============================================================================
# ORCHESTRATOR
# =============================================================================
def run_all(
    sources: Sequence[SourceConfig],
    settings: Settings,
    browser_factory: BrowserFactory | None = None,
) -> list[ScrapeResult]:
    """
    Scrape every source in order with one shared browser.

    Returns one ScrapeResult per source, in input order. The browser is
    closed exactly once, however many sources failed.
    """
    factory = browser_factory or open_browser
    browser = factory(settings)
    results: list[ScrapeResult] = []

    try:
        for i, source in enumerate(sources):
            if i > 0 and settings.source_delay > 0:
                time.sleep(settings.source_delay)

            t0 = time.perf_counter_ns()
            try:
                result = scrape_source(source, browser, settings)
            except Exception as e:
                message = str(e) or type(e).__name__
                logging_bridge.error({
                    "component": "career_scan.engine",
                    "op": "scrape_source",
                    "company": source.name,
                    "url": source.url,
                    "error": repr(e),
                })
                result = ScrapeResult.failed(source.name, message)

            logging_bridge.activity({
                "component": "career_scan.engine",
                "op": "source_done",
                "company": source.name,
                "success": result.success,
                "found": len(result.jobs),
                "duration_us": int((time.perf_counter_ns() - t0) // 1000),
            })
            results.append(result)
    finally:
        browser.close()

    return results


# =============================================================================
# PIPELINE
# =============================================================================
def run_once(settings: Settings, browser_factory: BrowserFactory | None = None) -> RunReport:
    """
    One complete cycle: scrape all sources, aggregate, filter, report.

    Raises ConfigError before any scraping if there is no usable source.
    """
    start_ns = time.perf_counter_ns()
    sources = settings.sources()

    logging_bridge.activity({
        "component": "career_scan.engine",
        "op": "start",
        "sources": [s.name for s in sources],
        "render_js": settings.render_js,
        "apply_filters": settings.apply_filters,
    })

    results = run_all(sources, settings, browser_factory)
    scraped_at = now_iso()

    scraped: list[JobPosting] = []
    for res in results:
        scraped.extend(res.jobs)

    if settings.apply_filters:
        jobs = filter_jobs(scraped, settings.policy)
        stats = filter_stats(scraped, jobs, settings.policy)
    else:
        jobs = list(scraped)
        stats = None

    report = RunReport(
        scraped_at=scraped_at,
        results=tuple(results),
        scraped=tuple(scraped),
        jobs=tuple(jobs),
        stats=stats,
    )

    # -------------------------------------------------------------------------
    # SUMMARY LOG (always emitted)
    # -------------------------------------------------------------------------
    logging_bridge.activity({
        "component": "career_scan.engine",
        "op": "summary",
        "found_by_source": {r.company: len(r.jobs) for r in results},
        "failed": [e["company"] for e in report.errors],
        "total_scraped": len(scraped),
        "total_jobs": len(jobs),
        "stats": stats.to_dict() if stats else None,
        "total_us": int((time.perf_counter_ns() - start_ns) // 1000),
    })
    return report


def summary_message(report: RunReport) -> str:
    """e.g. "4 matching postings out of 31 scraped from 3 sources (1 failed)" """
    ok = sum(1 for r in report.results if r.success)
    failed = len(report.results) - ok
    msg = f"{len(report.jobs)} matching postings out of {len(report.scraped)} scraped from {ok} sources"
    if failed:
        msg += f" ({failed} failed)"
    return msg
