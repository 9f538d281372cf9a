from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .cell import SkippedCell

"""Loaded worksheet snapshot and load failure models.

A LoadedSheet is built completely before it replaces the previous snapshot of
a SpreadsheetSource, so readers only ever see a whole table.
"""

__all__ = [
    "LoadedSheet",
    "LoadFailure",
]


@dataclass(frozen=True)
class LoadedSheet:
    """Everything derived from one successful load of a worksheet feed."""
    title: str  # worksheet title reported by the feed
    updated: str  # feed last-updated stamp
    header_map: Mapping[str, str]  # column label -> field name
    catalog: Mapping[str, str]  # field name -> description
    records: tuple[Mapping[str, str], ...]  # zero-based, filtered, read-only
    skipped_cells: tuple[SkippedCell, ...] = field(default_factory=tuple)
    filtered_rows: int = 0  # rows dropped by the filter chain


@dataclass(frozen=True)
class LoadFailure:
    """Diagnostic for a failed load; the previous snapshot stays in place."""
    feed_key: str
    worksheet_index: int
    error_type: str  # UPPER_SNAKE (FETCH_ERROR, PARSE_ERROR, ...)
    message: str
    status: int | None = None  # HTTP status, None when no response was received

    def describe(self) -> str:
        status = self.status if self.status is not None else "n/a"
        return (
            f"failed to load worksheet {self.worksheet_index} of sheet '{self.feed_key}': "
            f"{self.error_type} status={status} {self.message}"
        )
