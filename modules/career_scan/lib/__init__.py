# modules/career_scan/lib/__init__.py
from __future__ import annotations

# Re-export commonly-used types for convenience
from .browser import BrowserError, NavigationTimeout
from .config import ConfigError, SelectorProfile, Settings, SourceConfig
from .engine import run_all, run_once
from .experience import classify
from .filters import FilterPolicy, filter_jobs, filter_stats
from .models import FilterStats, JobPosting, RawRecord, RunReport, ScrapeResult

__all__ = [
    "BrowserError",
    "ConfigError",
    "FilterPolicy",
    "FilterStats",
    "JobPosting",
    "NavigationTimeout",
    "RawRecord",
    "RunReport",
    "ScrapeResult",
    "SelectorProfile",
    "Settings",
    "SourceConfig",
    "classify",
    "filter_jobs",
    "filter_stats",
    "run_all",
    "run_once",
]
