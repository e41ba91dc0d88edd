import json
import os

from modules.career_scan.lib import logging_bridge
from service import logging_utils as L


def _read_lines(path):
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f]


def test_activity_log_is_jsonl_with_metadata_and_redaction(tmp_path):
    L.write_activity_log({
        "op": "start",
        "company": "Acme",
        "headers": {"Authorization": "Bearer abc", "Accept": "text/html"},
        "note": "bearer xyz",
    })
    path = L.get_activity_log_path()
    assert path.startswith(str(tmp_path / "logs"))
    assert os.path.basename(path).startswith("activity-test-")

    (rec,) = _read_lines(path)
    assert rec["company"] == "Acme"
    assert rec["headers"]["Authorization"] == "***REDACTED***"
    assert rec["headers"]["Accept"] == "text/html"
    assert rec["note"] == "bearer ***REDACTED***"
    assert rec["_meta"]["pid"] == os.getpid()


def test_redact_does_not_mutate_input():
    record = {"api_key": "k", "nested": [{"password": "p"}]}
    out = L.redact(record)
    assert out == {"api_key": "***REDACTED***", "nested": [{"password": "***REDACTED***"}]}
    assert record["api_key"] == "k"


def test_log_disable_turns_writes_off(monkeypatch):
    monkeypatch.setenv("LOG_DISABLE", "1")
    L.write_activity_log({"op": "x"})
    L.write_error_log({"op": "y"})
    assert not os.path.exists(L.get_activity_log_path())
    assert not os.path.exists(L.get_error_log_path())


def test_size_rotation_keeps_old_data(monkeypatch):
    monkeypatch.setenv("ACTIVITY_LOG_MAX_BYTES", "10")
    L.write_activity_log({"op": "first"})
    L.write_activity_log({"op": "second"})
    path = L.get_activity_log_path()
    rotated = [p for p in os.listdir(os.path.dirname(path)) if p.startswith(os.path.basename(path) + ".")]
    assert len(rotated) == 1
    assert [r["op"] for r in _read_lines(path)] == ["second"]


def test_bridge_warning_lands_in_activity_log_and_stdlib(caplog):
    logging_bridge.warning({"component": "career_scan.session", "op": "no_listings", "secret": "s"})
    (rec,) = _read_lines(L.get_activity_log_path())
    assert rec["level"] == "warning"
    assert rec["secret"] == "***REDACTED***"
    assert "no_listings" in caplog.text


def test_bridge_falls_back_to_stdlib_when_write_fails(monkeypatch, caplog):
    def broken(record):
        raise OSError("disk full")

    monkeypatch.setattr(logging_bridge._backend, "write_error_log", broken)
    with caplog.at_level("ERROR", logger="career_scan.error"):
        logging_bridge.error({"op": "scrape_source", "company": "Globex"})
    assert "Globex" in caplog.text
