"""
Cell feed fetching and parsing.

Downloads a worksheet's public cell feed over HTTP and parses the Atom XML
into a ParsedFeed (title, updated stamp, ordered cell entries).

Example usage:
    url = build_feed_url("1AbCdEf", 1)
    feed = FeedFetcher(timeout=30).fetch(url)
    for entry in feed.entries:
        print(entry.label, entry.content)
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from ..models.feed import FeedEntry, ParsedFeed

# Public, read-only, cell-granularity worksheet feed. {key} = spreadsheet key,
# {worksheet} = 1-based worksheet index.
FEED_URL_TEMPLATE = "https://spreadsheets.google.com/feeds/cells/{key}/{worksheet}/public/values"

REQUEST_HEADERS: Dict[str, str] = {
    "User-Agent": "sheetfeed/0.1",
    "Accept": "application/atom+xml, application/xml;q=0.9, */*;q=0.1",
}

# Max characters of a response body kept in a FetchError message
_BODY_EXCERPT = 500


class FetchError(Exception):
    """
    Transport failure: non-success status, timeout or network error.

    Attributes:
        status: HTTP status code, or None when no response was received
        message: Diagnostic text (response body excerpt or exception text)
    """

    def __init__(self, status: Optional[int], message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"HTTP {status if status is not None else 'n/a'}: {message}")


class ParseError(Exception):
    """The feed payload could not be interpreted as a cell feed."""


def build_feed_url(feed_key: str, worksheet_index: int, template: str = FEED_URL_TEMPLATE) -> str:
    """
    Substitute the sheet key and worksheet index into the feed URL template.

    Args:
        feed_key: Spreadsheet key (URL-quoted on substitution)
        worksheet_index: 1-based worksheet index
        template: URL pattern with {key} and {worksheet} placeholders

    Returns:
        The feed URL

    Raises:
        ValueError: If the template lacks a placeholder or has unknown ones

    Example:
        >>> build_feed_url("abc", 2)
        'https://spreadsheets.google.com/feeds/cells/abc/2/public/values'
    """
    if "{key}" not in template or "{worksheet}" not in template:
        raise ValueError(f"feed URL template must contain {{key}} and {{worksheet}}: {template}")
    try:
        return template.format(key=quote(feed_key.strip(), safe=""), worksheet=worksheet_index)
    except (KeyError, IndexError) as e:
        raise ValueError(f"unknown placeholder {e} in feed URL template: {template}") from e


def _local_name(tag: Any) -> str:
    """Strip the '{namespace}' prefix ElementTree puts on tag names."""
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ET.Element, name: str) -> str:
    for child in element:
        if _local_name(child.tag) == name:
            return "".join(child.itertext())
    return ""


def parse_feed(payload: bytes | str) -> ParsedFeed:
    """
    Parse a cell feed document.

    Matching is namespace-agnostic: the feed root must be <feed>, the title and
    updated stamp come from its <title> and <updated> children, and every
    <entry> contributes (<title> as location label, <content> as cell text).

    Raises:
        ParseError: Malformed XML or a document that is not a feed
    """
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as e:
        raise ParseError(f"malformed feed XML: {e}") from e

    if _local_name(root.tag) != "feed":
        raise ParseError(f"unexpected root element <{_local_name(root.tag)}>, expected <feed>")

    entries = []
    for element in root:
        if _local_name(element.tag) != "entry":
            continue
        entries.append(
            FeedEntry(
                label=_child_text(element, "title").strip(),
                content=_child_text(element, "content"),
            )
        )
    return ParsedFeed(
        title=_child_text(root, "title").strip(),
        updated=_child_text(root, "updated").strip(),
        entries=tuple(entries),
    )


class FeedFetcher:
    """
    Fetches and parses cell feeds with requests.

    One blocking GET per fetch(); no retries.
    """

    def __init__(self, timeout: int = 30, session: Optional[requests.Session] = None) -> None:
        """
        Args:
            timeout: Request timeout in seconds
            session: Optional requests session (a new one if omitted)
        """
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def fetch(self, url: str) -> ParsedFeed:
        """
        GET the feed and parse it.

        Raises:
            FetchError: Non-200 response, timeout or connection failure
            ParseError: Response body is not a readable cell feed
        """
        try:
            response = self.session.get(url, timeout=self.timeout, headers=REQUEST_HEADERS)
        except requests.Timeout as e:
            raise FetchError(None, f"timed out after {self.timeout}s: {e}") from e
        except requests.RequestException as e:
            raise FetchError(None, f"request failed: {e}") from e

        if response.status_code != 200:
            body = (response.text or "")[:_BODY_EXCERPT]
            raise FetchError(response.status_code, body)
        return parse_feed(response.content)
