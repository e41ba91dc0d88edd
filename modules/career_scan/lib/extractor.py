# modules/career_scan/lib/extractor.py
"""
Listing extraction from a serialized document snapshot.

The browser layer hands over page HTML as a plain string; everything here is
data-in/data-out and never touches a live page.
"""

from __future__ import annotations

import logging
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag

from .config import SourceConfig
from .keywords import NOT_SPECIFIED
from .models import RawRecord
from .selector_chain import resolve_all, resolve_one
from .utils import now_iso, origin_of

log = logging.getLogger(__name__)


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html5lib")


def extract(html: str, source: SourceConfig, page_url: str) -> list[RawRecord]:
    """
    Map every listing element on the page to a RawRecord.

    Listings without a resolvable, non-empty title are dropped. Location falls
    back to "Not specified", url to `page_url`; relative links are joined
    against the page origin.
    """
    doc = parse_document(html)
    selectors = source.selectors

    listings = resolve_all(doc, selectors.job_list)
    if not listings:
        log.debug("%s: no job listings found with selectors %r", source.name, selectors.job_list)
        return []

    origin = origin_of(page_url)
    records: list[RawRecord] = []
    for el in listings:
        title = _text(resolve_one(el, selectors.job_title))
        if not title:
            continue
        records.append(
            RawRecord(
                title=title,
                location=_text(resolve_one(el, selectors.job_location)) or NOT_SPECIFIED,
                url=_link(resolve_one(el, selectors.job_link), origin) or page_url,
                description=_text(resolve_one(el, selectors.job_description)) or None,
                extracted_at=now_iso(),
            )
        )

    log.debug("%s: %d listings, %d with a title", source.name, len(listings), len(records))
    return records


# ---- internals ----


def _text(el: Tag | None) -> str:
    if el is None:
        return ""
    return el.get_text(" ", strip=True)


def _link(el: Tag | None, origin: str) -> str:
    if el is None:
        return ""
    href = el.get("href")
    if isinstance(href, list):  # multi-valued attribute guard
        href = " ".join(href)
    href = (href or "").strip()
    if not href:
        return ""
    if urlsplit(href).scheme:
        return href
    return urljoin(origin + "/", href)
