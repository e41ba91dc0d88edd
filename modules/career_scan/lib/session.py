from __future__ import annotations

import logging
import os

from . import logging_bridge
from .browser import BrowserControl
from .config import Settings, SourceConfig
from .experience import classify
from .extractor import extract
from .models import JobPosting, RawRecord, ScrapeResult
from .utils import slugify

log = logging.getLogger(__name__)

# Mid-page first, then the bottom, to trigger lazy-loaded listings.
_SCROLL_STEPS = (0.5, 1.0)


def enrich(raw: RawRecord, company: str) -> JobPosting:
    """Classify a raw record; its description goes no further than this."""
    return JobPosting(
        company=company,
        title=raw.title,
        location=raw.location,
        url=raw.url,
        experience_years=classify(raw.description),
        extracted_at=raw.extracted_at,
    )


def scrape_source(source: SourceConfig, browser: BrowserControl, settings: Settings) -> ScrapeResult:
    """
    Visit one source in its own browsing context and return its postings.

    Failures (navigation timeout, context errors, ...) propagate to the caller;
    the context is closed on every path.
    """
    logging_bridge.activity({
        "component": "career_scan.session",
        "op": "start",
        "company": source.name,
        "url": source.url,
    })

    context = browser.new_context(settings.user_agent)
    try:
        context.goto(source.url, settings.navigation_timeout)
        context.wait(settings.settle_delay)
        for fraction in _SCROLL_STEPS:
            context.scroll(fraction)
            context.wait(settings.scroll_pause)

        html = context.content()
        page_url = context.url or source.url
        if settings.debug_dump_dir:
            _dump_snapshot(settings.debug_dump_dir, source.name, html)

        raw_records = extract(html, source, page_url)
        jobs = [enrich(r, source.name) for r in raw_records]

        if not jobs:
            logging_bridge.warning({
                "component": "career_scan.session",
                "op": "no_listings",
                "company": source.name,
                "url": page_url,
                "job_list_selectors": source.selectors.job_list,
            })

        # Polite pause before the context goes away.
        context.wait(settings.close_delay)
    finally:
        context.close()

    logging_bridge.activity({
        "component": "career_scan.session",
        "op": "done",
        "company": source.name,
        "found": len(jobs),
    })
    return ScrapeResult.ok(source.name, jobs)


def _dump_snapshot(directory: str, name: str, html: str) -> None:
    path = os.path.join(directory, f"{slugify(name) or 'source'}.html")
    try:
        os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(html)
        log.debug("%s: wrote HTML snapshot to %s (len=%d)", name, path, len(html))
    except OSError as e:
        log.debug("%s: failed to write HTML snapshot: %s", name, e)
