# tests/test_config.py
import json

import pytest

from modules.career_scan.lib import config as cs_config
from modules.career_scan.lib.config import ConfigError, Settings


def _write(tmp_path, data, name="companies.json"):
    p = tmp_path / name
    p.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return str(p)


def test_example_and_urlless_entries_are_excluded(make_settings):
    settings = make_settings()
    assert [s.name for s in settings.sources()] == ["Acme", "Globex"]


def test_exclusion_reasons(companies_file):
    data = cs_config.load_companies_file(str(companies_file))
    by_name = {s.name: s for s in cs_config.parse_sources(data["companies"])}
    assert by_name["Template Co"].exclusion_reason == "marked as example"
    assert by_name["No URL Inc"].exclusion_reason == "missing url"
    assert by_name["Acme"].exclusion_reason is None


def test_selector_keys_are_mapped_from_camel_case(make_settings):
    acme = make_settings().sources()[0]
    assert acme.selectors.job_list == "div[, .job-item"
    assert acme.selectors.job_link == "a.apply, a"
    globex = make_settings().sources()[1]
    assert globex.selectors.job_location == ""


def test_no_usable_source_is_fatal(tmp_path):
    path = _write(tmp_path, {"companies": [{"name": "Tmpl", "url": "https://t.example", "notes": "EXAMPLE"}]})
    with pytest.raises(ConfigError, match="No usable companies"):
        Settings.from_env_and_kwargs({"companies_path": path})
    with pytest.raises(ConfigError):
        cs_config.load_sources(path)


def test_missing_and_malformed_files(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        Settings.from_env_and_kwargs({"companies_path": str(tmp_path / "nope.json")})
    with pytest.raises(ConfigError, match="invalid JSON"):
        Settings.from_env_and_kwargs({"companies_path": _write(tmp_path, "{not json")})
    with pytest.raises(ConfigError, match="to be a list"):
        Settings.from_env_and_kwargs({"companies_path": _write(tmp_path, {"companies": {"name": "x"}})})
    with pytest.raises(ConfigError, match="requires a 'name'"):
        Settings.from_env_and_kwargs({"companies_path": _write(tmp_path, {"companies": [{"url": "https://a"}]})})


def test_bare_list_and_yaml_are_accepted(tmp_path):
    path = _write(tmp_path, [{"name": "A", "url": "https://a.example", "selectors": {"jobList": "li"}}])
    assert [s.name for s in cs_config.load_sources(path)] == ["A"]

    yaml_text = (
        "companies:\n"
        "  - name: B\n"
        "    url: https://b.example/jobs\n"
        "    selectors:\n"
        "      jobList: '.job, li'\n"
        "      jobTitle: h3\n"
    )
    path = _write(tmp_path, yaml_text, name="companies.yaml")
    (b,) = cs_config.load_sources(path)
    assert b.selectors.job_list == ".job, li"
    assert b.selectors.job_title == "h3"


def test_defaults(make_settings):
    s = make_settings()
    assert s.headless is True
    assert s.render_js is True
    assert s.apply_filters is True
    assert s.navigation_timeout == 30.0
    assert s.policy.max_experience_years == 3
    assert "Chrome/120" in s.user_agent


def test_env_fallback_and_kwargs_precedence(make_settings, monkeypatch):
    monkeypatch.setenv("HEADLESS", "false")
    monkeypatch.setenv("CAREER_SCAN_NAV_TIMEOUT", "12.5")
    monkeypatch.setenv("CAREER_SCAN_APPLY_FILTERS", "0")
    s = make_settings()
    assert s.headless is False
    assert s.navigation_timeout == 12.5
    assert s.apply_filters is False

    s = make_settings(headless="yes", navigation_timeout=5)
    assert s.headless is True
    assert s.navigation_timeout == 5.0


@pytest.mark.parametrize(
    ("overrides", "match"),
    [
        ({"navigation_timeout": 0}, "navigation_timeout"),
        ({"source_delay": -1}, "source_delay"),
        ({"settle_delay": "soon"}, "settle_delay"),
        ({"max_experience_years": "many"}, "max_experience_years"),
    ],
)
def test_invalid_values_raise(make_settings, overrides, match):
    with pytest.raises(ConfigError, match=match):
        make_settings(**overrides)


def test_filters_block_replaces_keyword_tables(tmp_path):
    path = _write(
        tmp_path,
        {
            "companies": [{"name": "A", "url": "https://a.example"}],
            "filters": {
                "locationKeywords": ["Wien", "Graz"],
                "seniorKeywords": ["Senior"],
                "maxExperienceYears": 2,
            },
        },
    )
    s = Settings.from_env_and_kwargs({"companies_path": path})
    assert s.policy.location_keywords == ("wien", "graz")
    assert s.policy.senior_keywords == ("senior",)
    assert s.policy.max_experience_years == 2
    assert "junior" in s.policy.junior_keywords

    s = Settings.from_env_and_kwargs({"companies_path": path, "max_experience_years": 4})
    assert s.policy.max_experience_years == 4


def test_filters_block_validation(tmp_path):
    path = _write(
        tmp_path,
        {"companies": [{"name": "A", "url": "https://a.example"}], "filters": {"juniorKeywords": "junior"}},
    )
    with pytest.raises(ConfigError, match="juniorKeywords"):
        Settings.from_env_and_kwargs({"companies_path": path})
