from __future__ import annotations

from dataclasses import dataclass, field

"""Parsed cell-feed models.

These are the values handed over by the feed fetcher/parser: the worksheet
title, its last-updated stamp and the ordered entries (location label + text).
"""

__all__ = [
    "FeedEntry",
    "ParsedFeed",
]


@dataclass(frozen=True)
class FeedEntry:
    label: str  # e.g. "C12"
    content: str


@dataclass(frozen=True)
class ParsedFeed:
    """A successfully fetched and parsed worksheet feed."""
    title: str
    updated: str  # feed 側の表記をそのまま保持 (ISO8601 想定)
    entries: tuple[FeedEntry, ...] = field(default_factory=tuple)
