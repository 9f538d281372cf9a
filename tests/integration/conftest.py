from __future__ import annotations

from typing import Any, Dict
from unittest.mock import patch

import pytest

from sheetfeed.cli import main as cli_main


class _Response:
    def __init__(self, status: int, body: str) -> None:
        self.status_code = status
        self.text = body
        self.content = body.encode("utf-8")

class FeedSession:
    """requests.Session double answering GETs from a URL -> (status, body) table.

    A value that is an exception instance is raised instead.
    """

    def __init__(self, routes: Dict[str, Any]) -> None:
        self.routes = routes
        self.calls: list[str] = []

    def get(self, url: str, **kwargs: Any) -> _Response:
        self.calls.append(url)
        route = self.routes.get(url, (404, "not found"))
        if isinstance(route, Exception):
            raise route
        status, body = route
        return _Response(status, body)

@pytest.fixture
def run_cli(clean_logging, write_config):
    """Run the CLI in the temp workdir with HTTP answered from a routes table."""
    def _run(routes, argv=None):
        session = FeedSession(routes)
        with patch("sheetfeed.feed.fetcher.requests.Session", return_value=session), \
                patch("sheetfeed.services.progress.is_tty_enabled", return_value=False):
            code = cli_main(argv or [])
        return code, session
    return _run
