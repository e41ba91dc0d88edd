# tests/conftest.py
import json
import os
import pathlib
import warnings
from types import SimpleNamespace

import pytest
from freezegun import freeze_time

from modules.career_scan.lib import config as cs_config
from modules.career_scan.lib.browser import BrowserError

warnings.filterwarnings("error", category=DeprecationWarning)


# ---------------------------------------------------------------------
# Live tests are opt-in: use --live or RUN_LIVE_TESTS=1
# ---------------------------------------------------------------------
def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--live",
        action="store_true",
        default=False,
        help="Run tests marked as 'live' (real browser or network).",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "live: marks tests that launch a real browser or hit the network (skipped by default).",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    run_live = config.getoption("--live") or os.getenv("RUN_LIVE_TESTS") == "1"
    if run_live:
        return
    skip_live = pytest.mark.skip(reason="live tests disabled (use --live or RUN_LIVE_TESTS=1)")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


# ---------------------------------------------------------------------
# Test-wide env defaults (autouse, function-scoped)
# ---------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _env_defaults(monkeypatch, tmp_path):
    # Write logs to a throwaway dir so real logs stay clean (per test)
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("ACTIVITY_LOG_PREFIX", "activity-test")
    monkeypatch.setenv("ERROR_LOG_PREFIX", "error-test")
    monkeypatch.delenv("LOG_DISABLE", raising=False)
    for name in (
        "CAREER_SCAN_COMPANIES",
        "CAREER_SCAN_OUTPUT",
        "CAREER_SCAN_RENDER_JS",
        "CAREER_SCAN_APPLY_FILTERS",
        "CAREER_SCAN_NAV_TIMEOUT",
        "CAREER_SCAN_SOURCE_DELAY",
        "CAREER_SCAN_DEBUG_DIR",
        "HEADLESS",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def frozen_utc():
    with freeze_time("2025-01-01T00:00:00Z"):
        yield


# ---------------------------------------------------------------------
# Pages & companies
# ---------------------------------------------------------------------
ACME_URL = "https://acme.example/careers"
GLOBEX_URL = "https://globex.example/jobs"

ACME_SELECTORS = {
    "jobList": "div[, .job-item",
    "jobTitle": ".title, h3",
    "jobLocation": ".location",
    "jobLink": "a.apply, a",
    "jobDescription": ".description",
}

ACME_HTML = """
<html><body>
  <ul class="jobs">
    <li class="job-item">
      <h3>Junior Python Developer</h3>
      <span class="location">Berlin, Germany</span>
      <a href="/jobs/1">Apply</a>
      <p class="description">1-2 years of experience with Python.</p>
    </li>
    <li class="job-item">
      <h3>Senior Backend Engineer</h3>
      <span class="location">München</span>
      <a href="https://acme.example/jobs/2">Apply</a>
      <p class="description">You bring 5+ years of experience.</p>
    </li>
    <li class="job-item">
      <h3>Graduate Developer</h3>
      <a href="jobs/3">Apply</a>
      <p class="description">We welcome graduates.</p>
    </li>
    <li class="job-item">
      <span class="location">Hamburg</span>
      <a href="/jobs/4">No title here</a>
    </li>
  </ul>
</body></html>
"""


@pytest.fixture
def acme_page() -> SimpleNamespace:
    return SimpleNamespace(url=ACME_URL, html=ACME_HTML, selectors=dict(ACME_SELECTORS))


@pytest.fixture
def companies_data() -> dict:
    return {
        "companies": [
            {
                "name": "Template Co",
                "url": "https://template.example/jobs",
                "selectors": ACME_SELECTORS,
                "notes": "Example entry, replace me",
            },
            {"name": "Acme", "url": ACME_URL, "selectors": ACME_SELECTORS},
            {
                "name": "Globex",
                "url": GLOBEX_URL,
                "selectors": {"jobList": ".opening", "jobTitle": "h2"},
            },
            {"name": "No URL Inc", "selectors": ACME_SELECTORS},
        ]
    }


@pytest.fixture
def companies_file(tmp_path: pathlib.Path, companies_data: dict) -> pathlib.Path:
    path = tmp_path / "companies.json"
    path.write_text(json.dumps(companies_data), encoding="utf-8")
    return path


@pytest.fixture
def make_settings(companies_file, tmp_path):
    """Settings factory with all waits zeroed; kwargs override."""

    def _make(**overrides):
        kwargs = {
            "companies_path": str(companies_file),
            "output_path": str(tmp_path / "out" / "jobs.json"),
            "settle_delay": 0,
            "scroll_pause": 0,
            "close_delay": 0,
            "source_delay": 0,
        }
        kwargs.update(overrides)
        return cs_config.Settings.from_env_and_kwargs(kwargs)

    return _make


# ---------------------------------------------------------------------
# In-memory browser control
# ---------------------------------------------------------------------
class FakeContext:
    def __init__(self, browser: "FakeBrowser", user_agent: str) -> None:
        self._browser = browser
        self.user_agent = user_agent
        self._url = ""
        self._html = None
        self.closed = False

    @property
    def url(self) -> str:
        return self._url

    def goto(self, url: str, timeout: float) -> None:
        self._browser.visits.append((url, timeout))
        outcome = self._browser.pages.get(url)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            raise BrowserError(f"Navigation to {url} failed: 404")
        self._url = url
        self._html = outcome

    def wait(self, seconds: float) -> None:
        self._browser.waits.append(seconds)

    def scroll(self, fraction: float) -> None:
        self._browser.scrolls.append(fraction)

    def content(self) -> str:
        if self._html is None:
            raise BrowserError("No document loaded")
        return self._html

    def close(self) -> None:
        self.closed = True


class FakeBrowser:
    """
    pages: url -> html string, or an Exception instance to raise on goto().
    """

    def __init__(self, pages: dict) -> None:
        self.pages = dict(pages)
        self.contexts: list[FakeContext] = []
        self.visits: list[tuple[str, float]] = []
        self.waits: list[float] = []
        self.scrolls: list[float] = []
        self.close_calls = 0

    def new_context(self, user_agent: str) -> FakeContext:
        ctx = FakeContext(self, user_agent)
        self.contexts.append(ctx)
        return ctx

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def make_browser():
    return FakeBrowser
