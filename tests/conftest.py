# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Callable
from xml.sax.saxutils import escape

import pytest

from sheetfeed.feed.fetcher import FetchError, parse_feed
from sheetfeed.logging.init import reset_logging
from sheetfeed.models.feed import FeedEntry, ParsedFeed

ATOM_NS = "http://www.w3.org/2005/Atom"
GS_NS = "http://schemas.google.com/spreadsheets/2006"


class FakeFetcher:
    """Stands in for FeedFetcher: returns queued feeds or raises queued errors.

    The last queued item is repeated once the queue is down to one element.
    """

    def __init__(self, *results: ParsedFeed | Exception) -> None:
        self.results = list(results)
        self.urls: list[str] = []

    def queue(self, result: ParsedFeed | Exception) -> None:
        self.results.append(result)

    def fetch(self, url: str) -> ParsedFeed:
        self.urls.append(url)
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


def _feed_xml(cells: list[tuple[str, str]], title: str = "Sheet1", updated: str = "2024-05-01T10:00:00.000Z") -> str:
    entries = "".join(
        f"<entry><title type='text'>{escape(label)}</title>"
        f"<content type='text'>{escape(content)}</content></entry>"
        for label, content in cells
    )
    return (
        f"<?xml version='1.0' encoding='UTF-8'?>"
        f"<feed xmlns='{ATOM_NS}' xmlns:gs='{GS_NS}'>"
        f"<updated>{updated}</updated>"
        f"<title type='text'>{escape(title)}</title>"
        f"{entries}</feed>"
    )


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def feed_xml() -> Callable[..., str]:
    """Builder for Atom cell feed documents: feed_xml([("A1", "Name"), ...], title=..., updated=...)."""
    return _feed_xml


@pytest.fixture()
def make_feed() -> Callable[..., ParsedFeed]:
    """Builder for ParsedFeed values, going through the real XML parser."""
    def _make(cells: list[tuple[str, str]], title: str = "Sheet1", updated: str = "2024-05-01T10:00:00.000Z") -> ParsedFeed:
        return parse_feed(_feed_xml(cells, title=title, updated=updated).encode("utf-8"))
    return _make


@pytest.fixture()
def contacts_cells() -> list[tuple[str, str]]:
    # Row 1: title row, row 2: header, rows 3-4: data (out of order on purpose)
    return [
        ("B4", "bob@example.com"),
        ("A1", "Contact list"),
        ("A2", "Name"),
        ("B2", "Email"),
        ("A3", "Alice"),
        ("B3", "alice@example.com"),
        ("A4", "Bob"),
    ]


@pytest.fixture()
def fake_fetcher_cls():
    return FakeFetcher


@pytest.fixture()
def entries() -> Callable[..., tuple[FeedEntry, ...]]:
    def _entries(*pairs: tuple[str, str]) -> tuple[FeedEntry, ...]:
        return tuple(FeedEntry(label=label, content=content) for label, content in pairs)
    return _entries


@pytest.fixture()
def sample_config_yaml() -> str:
    return """timeout: 10
sheets:
  Contacts:
    feed_key: contacts-key
    worksheet: 1
    header_row: 2
    fields:
      Email: Primary e-mail
    filters:
      - {name: has_name, type: not_empty, column: A}
  Inventory:
    feed_key: inventory-key
    worksheet: 2
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


class UrlFetcher:
    """FeedFetcher stand-in that answers per feed key found in the URL."""

    def __init__(self, by_key: dict[str, ParsedFeed | Exception]) -> None:
        self.by_key = by_key
        self.urls: list[str] = []

    def fetch(self, url: str) -> ParsedFeed:
        self.urls.append(url)
        for key, result in self.by_key.items():
            if f"/{key}/" in url:
                if isinstance(result, Exception):
                    raise result
                return result
        raise FetchError(404, "no such feed")


@pytest.fixture()
def url_fetcher_cls():
    return UrlFetcher
