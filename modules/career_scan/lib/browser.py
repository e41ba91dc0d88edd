# modules/career_scan/lib/browser.py
"""
Browser-control capability used by the source sessions.

The pipeline needs very little from a browser:
  - create an isolated browsing context (with a User-Agent)
  - navigate it to a URL within a timeout
  - wait / scroll so lazy content renders
  - snapshot the current document as HTML
  - close the context, and finally the browser itself

PlaywrightBrowser renders JavaScript with headless Chromium; HttpBrowser is a
plain requests fetch for static career pages.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Protocol

import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from .http_client import HttpClient

if TYPE_CHECKING:
    from .config import Settings

log = logging.getLogger(__name__)

CHROMIUM_ARGS = ("--no-sandbox", "--disable-setuid-sandbox")


class BrowserError(Exception):
    """Base exception for browser-control failures."""


class NavigationTimeout(BrowserError):
    """Navigation did not finish within its bound."""


class BrowsingContext(Protocol):
    @property
    def url(self) -> str: ...

    def goto(self, url: str, timeout: float) -> None: ...

    def wait(self, seconds: float) -> None: ...

    def scroll(self, fraction: float) -> None: ...

    def content(self) -> str: ...

    def close(self) -> None: ...


class BrowserControl(Protocol):
    def new_context(self, user_agent: str) -> BrowsingContext: ...

    def close(self) -> None: ...


# =============================================================================
# PLAYWRIGHT (JS-rendered pages)
# =============================================================================
class PlaywrightContext:
    """One Playwright BrowserContext with a single page."""

    def __init__(self, context, page) -> None:
        self._context = context
        self._page = page

    @property
    def url(self) -> str:
        return self._page.url

    def goto(self, url: str, timeout: float) -> None:
        timeout_ms = timeout * 1000
        # Later waits and evaluations share the same bound.
        self._page.set_default_timeout(timeout_ms)
        try:
            self._page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise NavigationTimeout(f"Navigation to {url} timed out after {timeout:g}s") from e
        except PlaywrightError as e:
            raise BrowserError(f"Navigation to {url} failed: {e.message}") from e

    def wait(self, seconds: float) -> None:
        if seconds > 0:
            self._page.wait_for_timeout(seconds * 1000)

    def scroll(self, fraction: float) -> None:
        self._page.evaluate("(f) => window.scrollTo(0, document.body.scrollHeight * f)", fraction)

    def content(self) -> str:
        return self._page.content()

    def close(self) -> None:
        self._context.close()


class PlaywrightBrowser:
    """Headless Chromium shared by every source of a run."""

    def __init__(self, *, headless: bool = True) -> None:
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(headless=headless, args=list(CHROMIUM_ARGS))
        except Exception:
            self._playwright.stop()
            raise
        log.debug("chromium launched (headless=%s)", headless)

    def new_context(self, user_agent: str) -> PlaywrightContext:
        context = self._browser.new_context(user_agent=user_agent)
        try:
            page = context.new_page()
        except Exception:
            context.close()
            raise
        return PlaywrightContext(context, page)

    def close(self) -> None:
        try:
            self._browser.close()
        finally:
            self._playwright.stop()


# =============================================================================
# PLAIN HTTP (static pages, no JavaScript)
# =============================================================================
class HttpContext:
    """Static fetch; scrolling is meaningless so it does nothing."""

    def __init__(self, user_agent: str) -> None:
        self._client = HttpClient(user_agent=user_agent)
        self._url = ""
        self._html: str | None = None

    @property
    def url(self) -> str:
        return self._url

    def goto(self, url: str, timeout: float) -> None:
        try:
            page = self._client.fetch(url, timeout=timeout)
        except requests.Timeout as e:
            raise NavigationTimeout(f"Navigation to {url} timed out after {timeout:g}s") from e
        except requests.RequestException as e:
            raise BrowserError(f"Navigation to {url} failed: {e}") from e
        self._url, self._html = page.url, page.html

    def wait(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)

    def scroll(self, fraction: float) -> None:
        return None

    def content(self) -> str:
        if self._html is None:
            raise BrowserError("No document loaded; call goto() first")
        return self._html

    def close(self) -> None:
        self._client.close()


class HttpBrowser:
    def new_context(self, user_agent: str) -> HttpContext:
        return HttpContext(user_agent)

    def close(self) -> None:
        return None


def open_browser(settings: Settings) -> BrowserControl:
    """Default browser factory for the engine."""
    if settings.render_js:
        return PlaywrightBrowser(headless=settings.headless)
    return HttpBrowser()
