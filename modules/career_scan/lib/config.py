from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml

from .filters import FilterPolicy
from .utils import getenv_str, truthy

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Marker in a company's "notes" that flags a template entry, not a real source.
EXAMPLE_MARKER = "example"


# -----------------------------
# Exceptions
# -----------------------------
class ConfigError(ValueError):
    """Raised when provided kwargs/env/companies file cannot form a valid Settings."""


# -----------------------------
# Models
# -----------------------------
@dataclass(frozen=True)
class SelectorProfile:
    """
    Fallback selector chains for one source. Each value is a comma-separated,
    ordered list of CSS selectors (see selector_chain.resolve_one/resolve_all).
    """

    job_list: str = ""
    job_title: str = ""
    job_location: str = ""
    job_link: str = ""
    job_description: str = ""


@dataclass(frozen=True)
class SourceConfig:
    """
    One company career page plus its selector profile.
    - name: company label used in output and logs
    - url: listing page to navigate to
    - notes: free text; containing "example" marks a template entry
    """

    name: str
    url: str
    selectors: SelectorProfile = field(default_factory=SelectorProfile)
    notes: str | None = None

    @property
    def exclusion_reason(self) -> str | None:
        if self.notes and EXAMPLE_MARKER in self.notes.lower():
            return "marked as example"
        if not self.url:
            return "missing url"
        return None

    @property
    def excluded(self) -> bool:
        return self.exclusion_reason is not None


@dataclass
class Settings:
    """
    Canonical configuration for a 'career_scan' run.

    Built once at process start via `from_env_and_kwargs` and passed by
    reference to the engine and the filter stage. Core modules never read
    the environment themselves.

    Durations are seconds.
    """

    companies_path: str = "config/companies.json"
    output_path: str = "output/jobs.json"

    # Browser behavior
    headless: bool = True
    render_js: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    navigation_timeout: float = 30.0
    settle_delay: float = 2.0
    scroll_pause: float = 1.0
    close_delay: float = 2.0
    source_delay: float = 3.0
    debug_dump_dir: str | None = None

    # Filter stage
    apply_filters: bool = True
    policy: FilterPolicy = field(default_factory=FilterPolicy)

    _sources: list[SourceConfig] = field(default_factory=list, repr=False)

    # ------------- convenience -------------
    def sources(self) -> list[SourceConfig]:
        """
        Return the usable (non-excluded) sources for this run, loading the
        companies file on first use.
        """
        if self._sources:
            return self._sources
        data = load_companies_file(self.companies_path)
        self._sources = usable_sources(parse_sources(data.get("companies")))
        if not self._sources:
            raise ConfigError(f"No usable companies in {self.companies_path} (all missing a url or marked as example)")
        return self._sources

    # ------------- constructors -------------
    @classmethod
    def from_env_and_kwargs(cls, kwargs: Mapping[str, Any] | None) -> Settings:
        """
        Build Settings from kwargs, falling back to environment variables,
        then to defaults.

            companies_path: str       env CAREER_SCAN_COMPANIES
            output_path: str          env CAREER_SCAN_OUTPUT
            headless: bool            env HEADLESS
            render_js: bool           env CAREER_SCAN_RENDER_JS
            apply_filters: bool       env CAREER_SCAN_APPLY_FILTERS
            navigation_timeout: float env CAREER_SCAN_NAV_TIMEOUT
            source_delay: float       env CAREER_SCAN_SOURCE_DELAY
            debug_dump_dir: str       env CAREER_SCAN_DEBUG_DIR
            settle_delay / scroll_pause / close_delay: float
            user_agent: str
            max_experience_years: int (overrides the companies file)

        The companies file is read here and its optional "filters" object
        replaces the default keyword tables.
        """
        kw = dict(kwargs or {})

        def pick(key: str, env: str | None = None) -> Any:
            val = kw.get(key)
            if val is None and env:
                val = getenv_str(env)
            return val

        def flag(key: str, env: str | None, default: bool) -> bool:
            val = pick(key, env)
            return default if val is None or str(val).strip() == "" else truthy(val)

        def seconds(key: str, env: str | None, default: float) -> float:
            val = pick(key, env)
            if val is None or str(val).strip() == "":
                return default
            try:
                return float(val)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"'{key}' must be a number of seconds (got {val!r}).") from e

        companies_path = str(pick("companies_path", "CAREER_SCAN_COMPANIES") or "").strip() or cls.companies_path
        output_path = str(pick("output_path", "CAREER_SCAN_OUTPUT") or "").strip() or cls.output_path
        debug_dump_dir = str(pick("debug_dump_dir", "CAREER_SCAN_DEBUG_DIR") or "").strip() or None
        user_agent = str(pick("user_agent") or "").strip() or DEFAULT_USER_AGENT

        data = load_companies_file(companies_path)
        policy = _parse_policy(data.get("filters"))
        max_years = pick("max_experience_years")
        if max_years is not None:
            try:
                policy = policy.with_max_experience(int(max_years))
            except (TypeError, ValueError) as e:
                raise ConfigError(f"'max_experience_years' must be an integer (got {max_years!r}).") from e

        settings = cls(
            companies_path=companies_path,
            output_path=output_path,
            headless=flag("headless", "HEADLESS", True),
            render_js=flag("render_js", "CAREER_SCAN_RENDER_JS", True),
            user_agent=user_agent,
            navigation_timeout=seconds("navigation_timeout", "CAREER_SCAN_NAV_TIMEOUT", 30.0),
            settle_delay=seconds("settle_delay", None, 2.0),
            scroll_pause=seconds("scroll_pause", None, 1.0),
            close_delay=seconds("close_delay", None, 2.0),
            source_delay=seconds("source_delay", "CAREER_SCAN_SOURCE_DELAY", 3.0),
            debug_dump_dir=debug_dump_dir,
            apply_filters=flag("apply_filters", "CAREER_SCAN_APPLY_FILTERS", True),
            policy=policy,
            _sources=usable_sources(parse_sources(data.get("companies"))),
        )
        _validate_settings(settings)
        return settings


# -----------------------------
# Companies file
# -----------------------------
def load_companies_file(path: str) -> dict[str, Any]:
    """
    Read a companies file (JSON, or YAML for .yaml/.yml) and return a dict
    with at least a "companies" key. A bare top-level list is accepted as
    the companies list.
    """
    try:
        with open(path, encoding="utf-8") as f:
            if path.lower().endswith((".yaml", ".yml")):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"companies file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"companies file is invalid JSON: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"companies file is invalid YAML: {path}") from e

    if isinstance(data, list):
        return {"companies": data}
    if not isinstance(data, dict):
        raise ConfigError(f"companies file must contain an object or a list: {path}")
    return data


def parse_sources(value: Any) -> list[SourceConfig]:
    """
    Parse the raw "companies" list into SourceConfig objects (excluded ones
    included; see usable_sources).
    """
    if not value:
        return []
    if not isinstance(value, list):
        raise ConfigError("Expected 'companies' to be a list of company objects.")
    out: list[SourceConfig] = []
    for i, item in enumerate(value):
        if not isinstance(item, dict):
            raise ConfigError(f"companies[{i}] must be an object.")
        name = str(item.get("name") or "").strip()
        if not name:
            raise ConfigError(f"companies[{i}] requires a 'name'.")
        raw_selectors = item.get("selectors") or {}
        if not isinstance(raw_selectors, dict):
            raise ConfigError(f"companies[{i}].selectors must be an object.")
        notes = item.get("notes")
        out.append(
            SourceConfig(
                name=name,
                url=str(item.get("url") or "").strip(),
                selectors=SelectorProfile(
                    job_list=str(raw_selectors.get("jobList") or ""),
                    job_title=str(raw_selectors.get("jobTitle") or ""),
                    job_location=str(raw_selectors.get("jobLocation") or ""),
                    job_link=str(raw_selectors.get("jobLink") or ""),
                    job_description=str(raw_selectors.get("jobDescription") or ""),
                ),
                notes=str(notes) if notes is not None else None,
            )
        )
    return out


def usable_sources(sources: list[SourceConfig]) -> list[SourceConfig]:
    return [s for s in sources if not s.excluded]


def load_sources(path: str) -> list[SourceConfig]:
    """Usable sources from a companies file; raises ConfigError if there are none."""
    sources = usable_sources(parse_sources(load_companies_file(path).get("companies")))
    if not sources:
        raise ConfigError(f"No usable companies in {path} (all missing a url or marked as example)")
    return sources


# -----------------------------
# Helpers
# -----------------------------
def _keyword_list(raw: Any, key: str) -> tuple[str, ...] | None:
    if raw is None:
        return None
    if not isinstance(raw, list) or not all(isinstance(x, str) for x in raw):
        raise ConfigError(f"filters.{key} must be a list of strings.")
    words = tuple(x.strip().lower() for x in raw if x.strip())
    if not words:
        raise ConfigError(f"filters.{key} cannot be empty.")
    return words


def _parse_policy(raw: Any) -> FilterPolicy:
    if raw is None:
        return FilterPolicy()
    if not isinstance(raw, dict):
        raise ConfigError("'filters' must be an object.")

    overrides: dict[str, Any] = {}
    for key, attr in (
        ("locationKeywords", "location_keywords"),
        ("juniorKeywords", "junior_keywords"),
        ("seniorKeywords", "senior_keywords"),
    ):
        words = _keyword_list(raw.get(key), key)
        if words is not None:
            overrides[attr] = words

    if raw.get("maxExperienceYears") is not None:
        try:
            overrides["max_experience_years"] = int(raw["maxExperienceYears"])
        except (TypeError, ValueError) as e:
            raise ConfigError("filters.maxExperienceYears must be an integer.") from e
    if raw.get("unknownExperienceIsJunior") is not None:
        overrides["unknown_experience_is_junior"] = truthy(raw["unknownExperienceIsJunior"])

    return FilterPolicy(**overrides)


def _validate_settings(s: Settings) -> None:
    if s.navigation_timeout <= 0:
        raise ConfigError("'navigation_timeout' must be > 0.")
    for name in ("settle_delay", "scroll_pause", "close_delay", "source_delay"):
        if getattr(s, name) < 0:
            raise ConfigError(f"'{name}' cannot be negative.")
    if not s.output_path.strip():
        raise ConfigError("'output_path' cannot be empty.")
    if s.policy.max_experience_years < 0:
        raise ConfigError("'max_experience_years' cannot be negative.")

    # Fatal before any scraping: there must be something to visit.
    s.sources()
