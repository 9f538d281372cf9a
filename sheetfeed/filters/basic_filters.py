"""
Basic filter implementations for common row selection rules.

Each filter looks at a single column (by column label, e.g. "A") of the row
and is configured from the ``filters`` list of a sheet in config/import.yml.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Dict

from .filter import Filter


def _cell(row: Mapping[str, str], column: str) -> str:
    return (row.get(column) or "").strip()


class NotEmptyFilter(Filter):
    """
    Keep rows whose column has non-blank content.

    A column that is missing from the row (the feed omits empty cells) counts
    as empty.
    """

    def __init__(self, name: str, config: Dict[str, Any] | None = None) -> None:
        """
        Args:
            name: Unique name for this filter instance
            config: Configuration dictionary with 'column'
        """
        super().__init__(name)
        self.config = config or {}
        self.column = str(self.config["column"]).upper()

    def keep(self, row: Mapping[str, str]) -> bool:
        return _cell(row, self.column) != ""


class EqualsFilter(Filter):
    """Keep rows whose column equals a fixed value (trimmed, optionally case-insensitive)."""

    def __init__(self, name: str, config: Dict[str, Any] | None = None) -> None:
        super().__init__(name)
        self.config = config or {}
        self.column = str(self.config["column"]).upper()
        self.ignore_case = bool(self.config.get("ignore_case", False))
        self.value = str(self.config["value"]).strip()
        if self.ignore_case:
            self.value = self.value.casefold()

    def keep(self, row: Mapping[str, str]) -> bool:
        content = _cell(row, self.column)
        if self.ignore_case:
            content = content.casefold()
        return content == self.value


class OneOfFilter(Filter):
    """
    Keep rows whose column matches one of the configured values.

    Configuration dictionary keys: 'column', 'values' (list of strings).
    """

    def __init__(self, name: str, config: Dict[str, Any] | None = None) -> None:
        super().__init__(name)
        self.config = config or {}
        self.column = str(self.config["column"]).upper()
        if isinstance(self.config["values"], str):
            raise ValueError("values must be a list, not a string")
        self.values = {str(v).strip() for v in self.config["values"]}
        if not self.values:
            raise ValueError("values must not be empty")

    def keep(self, row: Mapping[str, str]) -> bool:
        return _cell(row, self.column) in self.values


class PatternFilter(Filter):
    """
    Keep rows whose column contains a match for a regular expression.

    Uses ``re.search``, so anchor the pattern when a full match is wanted.
    Set 'exclude: true' to invert: rows that match are dropped instead.
    """

    def __init__(self, name: str, config: Dict[str, Any] | None = None) -> None:
        super().__init__(name)
        self.config = config or {}
        self.column = str(self.config["column"]).upper()
        self.pattern = re.compile(str(self.config["pattern"]))
        self.exclude = bool(self.config.get("exclude", False))

    def keep(self, row: Mapping[str, str]) -> bool:
        matched = self.pattern.search(row.get(self.column) or "") is not None
        return not matched if self.exclude else matched
