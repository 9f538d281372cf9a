from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from sheetfeed.cli import main as cli_main
from sheetfeed.feed.fetcher import FetchError

"""Exit code contract: 0 all sheets ok, 2 some sheets failed, 1 fatal."""


@pytest.fixture(autouse=True)
def _clean(clean_logging):
    with patch("sheetfeed.services.progress.is_tty_enabled", return_value=False):
        yield


def _run(fetcher, argv=None):
    with patch("sheetfeed.services.orchestrator.FeedFetcher", return_value=fetcher):
        return cli_main(argv or [])


def test_exit_code_fatal_missing_config(temp_workdir: Path, capsys):
    code = cli_main([])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_fatal_invalid_config(write_config: Path, capsys):
    write_config.write_text("sheets: {}\n", encoding="utf-8")
    assert cli_main([]) == 1
    assert "config validation failed" in capsys.readouterr().out


def test_exit_code_all_success(write_config: Path, make_feed, url_fetcher_cls, capsys):
    fetcher = url_fetcher_cls({
        "contacts-key": make_feed([("A2", "Name"), ("A3", "Alice")]),
        "inventory-key": make_feed([("A1", "sku")]),
    })
    assert _run(fetcher) == 0
    assert "SUMMARY sheets=2/2 success=2 failed=0" in capsys.readouterr().out


def test_exit_code_partial_failure(write_config: Path, make_feed, url_fetcher_cls, capsys):
    fetcher = url_fetcher_cls({
        "contacts-key": make_feed([("A2", "Name"), ("A3", "Alice")]),
        "inventory-key": FetchError(403, "forbidden"),
    })
    assert _run(fetcher) == 2
    out = capsys.readouterr().out
    assert "SUMMARY sheets=2/2 success=1 failed=1" in out


def test_exit_code_all_failed_is_partial(write_config: Path, url_fetcher_cls):
    assert _run(url_fetcher_cls({})) == 2
