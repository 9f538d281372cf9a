"""
Base class for row filters.

A filter is a predicate over one worksheet row, seen as a read-only mapping
of column label to cell content. Returning a truthy value keeps the row.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping


class Filter(ABC):
    """
    Abstract base class for row predicates.

    Concrete filters implement ``keep``. Instances are callable, so they can be
    used anywhere a plain predicate function is accepted.
    """

    def __init__(self, name: str) -> None:
        """
        Initialize the filter with a unique name.

        Args:
            name: Identifier used in log output and error messages
        """
        self.name = name

    @abstractmethod
    def keep(self, row: Mapping[str, str]) -> bool:
        """
        Decide whether a row stays in the worksheet.

        Args:
            row: Column label -> cell content for one data row

        Returns:
            True to keep the row, False to drop it
        """

    def __call__(self, row: Mapping[str, str]) -> bool:
        return self.keep(row)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


class FilterError(Exception):
    """
    Raised when a predicate fails while being applied to a row.

    Carries the failing predicate's name and the original exception so the
    load boundary can report it.
    """

    def __init__(self, filter_name: str, message: str, cause: Exception | None = None) -> None:
        self.filter_name = filter_name
        self.cause = cause
        super().__init__(f"Filter '{filter_name}' error: {message}")
