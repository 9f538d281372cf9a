from __future__ import annotations

import json
import re
from pathlib import Path

import pytest
import requests

"""Integration test: run where some sheets fail.

Failures of one sheet (HTTP status, timeout, unparseable body, broken
filter) must not stop the others; the run exits with 2 and every failure
ends up in the JSON Lines error log.
"""

FEED_BASE = "https://spreadsheets.google.com/feeds/cells"
CONTACTS_URL = f"{FEED_BASE}/contacts-key/1/public/values"
INVENTORY_URL = f"{FEED_BASE}/inventory-key/2/public/values"


@pytest.fixture
def contacts_feed(feed_xml) -> str:
    return feed_xml([("A2", "Name"), ("A3", "Alice"), ("A4", "Bob")], title="Contacts")


def _error_records(workdir: Path) -> list[dict]:
    (log_file,) = (workdir / "logs").glob("errors-*.log")
    return [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]


def _summary(out: str) -> dict[str, str]:
    line = next(l for l in out.splitlines() if l.startswith("SUMMARY "))
    return dict(re.findall(r"(\w+)=(\S+)", line))


def test_http_error_fails_one_sheet(run_cli, contacts_feed, temp_workdir: Path, capsys):
    routes = {CONTACTS_URL: (200, contacts_feed), INVENTORY_URL: (403, "<html>forbidden</html>")}
    code, _ = run_cli(routes)
    out = capsys.readouterr().out

    assert code == 2
    summary = _summary(out)
    assert summary["sheets"] == "2/2"
    assert summary["success"] == "1"
    assert summary["failed"] == "1"
    assert summary["rows"] == "2"
    assert "ERROR failed to load worksheet 2 of sheet 'inventory-key': FETCH_ERROR status=403" in out

    (record,) = _error_records(temp_workdir)
    assert record["sheet"] == "Inventory"
    assert record["cell"] == "-"
    assert record["error_type"] == "FETCH_ERROR"
    assert record["message"].startswith("status=403")


def test_timeout_fails_sheet_without_status(run_cli, contacts_feed, temp_workdir: Path, capsys):
    routes = {CONTACTS_URL: (200, contacts_feed), INVENTORY_URL: requests.Timeout("read timed out")}
    code, _ = run_cli(routes)
    out = capsys.readouterr().out

    assert code == 2
    assert "FETCH_ERROR status=n/a timed out" in out
    (record,) = _error_records(temp_workdir)
    assert record["message"].startswith("timed out")


def test_unparseable_feed_is_parse_error(run_cli, contacts_feed, temp_workdir: Path):
    routes = {CONTACTS_URL: (200, "<html><body>Sign in</body></html>"), INVENTORY_URL: (200, contacts_feed)}
    code, _ = run_cli(routes)

    assert code == 2
    (record,) = _error_records(temp_workdir)
    assert record["sheet"] == "Contacts"
    assert record["error_type"] == "PARSE_ERROR"


def test_all_sheets_failing_still_reports_summary(run_cli, temp_workdir: Path, capsys):
    code, session = run_cli({})
    out = capsys.readouterr().out

    assert code == 2
    assert len(session.calls) == 2
    summary = _summary(out)
    assert summary["success"] == "0"
    assert summary["failed"] == "2"
    assert summary["rows"] == "0"
    assert [r["error_type"] for r in _error_records(temp_workdir)] == ["FETCH_ERROR", "FETCH_ERROR"]


def test_failed_sheet_is_missing_from_export(run_cli, contacts_feed, temp_workdir: Path):
    export_dir = temp_workdir / "out"
    routes = {CONTACTS_URL: (200, contacts_feed), INVENTORY_URL: (500, "boom")}
    code, _ = run_cli(routes, ["--export-dir", str(export_dir)])

    assert code == 2
    assert sorted(p.name for p in export_dir.iterdir()) == ["Contacts.csv"]


def test_inspect_data_reports_load_error(run_cli, contacts_feed, capsys):
    routes = {CONTACTS_URL: (200, contacts_feed), INVENTORY_URL: (404, "gone")}
    code, _ = run_cli(routes, ["--inspect-data"])
    out = capsys.readouterr().out

    assert code == 2
    assert "SHEET: Inventory" in out
    assert "load_error: failed to load worksheet 2 of sheet 'inventory-key': FETCH_ERROR status=404 gone" in out
