# modules/career_scan/lib/http_client.py
from __future__ import annotations

import logging
from typing import NamedTuple

import requests
from bs4.dammit import EncodingDetector
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

LOG = logging.getLogger(__name__)

# Careers sites that rate-limit or sit behind a flaky CDN.
RETRY_STATUSES = (429, 500, 502, 503, 504)


class FetchedPage(NamedTuple):
    url: str  # after redirects
    status: int
    html: str


class HttpClient:
    """
    requests session for static career pages: one per browsing context, so the
    User-Agent and cookies never leak between sources.
    """

    def __init__(self, user_agent: str, timeout: float = 30.0, retries: int = 2):
        self.timeout = float(timeout)
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9,de;q=0.8",
        })
        adapter = HTTPAdapter(
            max_retries=Retry(
                total=retries,
                backoff_factor=0.5,
                status_forcelist=RETRY_STATUSES,
                allowed_methods=frozenset(["GET"]),
                raise_on_status=False,
            )
        )
        for scheme in ("http://", "https://"):
            self.session.mount(scheme, adapter)

    def fetch(self, url: str, timeout: float | None = None) -> FetchedPage:
        """GET a listing page; HTTP errors raise requests.HTTPError."""
        resp = self.session.get(url, timeout=timeout or self.timeout)
        resp.raise_for_status()
        if "charset" not in resp.headers.get("Content-Type", "").lower():
            # requests assumes ISO-8859-1 for bare text/html; the page's own <meta charset> wins.
            resp.encoding = (
                EncodingDetector.find_declared_encoding(resp.content, is_html=True)
                or resp.apparent_encoding
            )
        LOG.debug("GET %s -> %s (%d bytes)", url, resp.status_code, len(resp.content))
        return FetchedPage(url=resp.url, status=resp.status_code, html=resp.text)

    def close(self) -> None:
        self.session.close()
