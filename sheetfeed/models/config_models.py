from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

"""Config dataclasses for the spreadsheet cell-feed import source.

SheetConfig describes one worksheet to read; ImportConfig is the root object
built from config/import.yml by sheetfeed.config.loader.
"""

__all__ = [
    "ConfigurationError",
    "RowPredicate",
    "SheetConfig",
    "ImportConfig",
    "DEFAULT_TIMEOUT",
]

# A predicate receives the column-label keyed view of one row and returns
# a truthy value to keep it.
RowPredicate = Callable[[Mapping[str, str]], Any]

DEFAULT_TIMEOUT = 30


class ConfigurationError(Exception):
    """Raised for bad or missing construction input. Never deferred to load time."""


@dataclass(frozen=True)
class SheetConfig:
    """Configuration for a single worksheet of a published spreadsheet.

    Attributes:
        feed_key: identifies the remote spreadsheet (required, non-blank)
        worksheet_index: 1-based worksheet (tab) number
        header_row_index: row holding field names; 0 means "no header row"
        field_overrides: field name -> description, wins over header names
        filters: ordered row predicates, a row is kept only if all return truthy
    """
    feed_key: str
    worksheet_index: int = 1
    header_row_index: int = 0
    field_overrides: Mapping[str, str] = field(default_factory=dict)
    filters: tuple[RowPredicate, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.feed_key, str) or not self.feed_key.strip():
            raise ConfigurationError("feed_key is required")
        if isinstance(self.worksheet_index, bool) or not isinstance(self.worksheet_index, int):
            raise ConfigurationError(f"worksheet_index must be an integer: {self.worksheet_index!r}")
        if self.worksheet_index < 1:
            raise ConfigurationError(f"worksheet_index must be >= 1: {self.worksheet_index}")
        if isinstance(self.header_row_index, bool) or not isinstance(self.header_row_index, int):
            raise ConfigurationError(f"header_row_index must be an integer: {self.header_row_index!r}")
        if self.header_row_index < 0:
            raise ConfigurationError(f"header_row_index must be >= 0: {self.header_row_index}")
        if not isinstance(self.field_overrides, Mapping):
            raise ConfigurationError(f"field_overrides must be a mapping: {self.field_overrides!r}")
        for name, description in self.field_overrides.items():
            if not isinstance(name, str) or not isinstance(description, str):
                raise ConfigurationError(f"field override must map str to str: {name!r}: {description!r}")
        if isinstance(self.filters, (str, bytes)) or not isinstance(self.filters, Iterable):
            raise ConfigurationError(f"filters must be a sequence of predicates: {self.filters!r}")
        filters = tuple(self.filters)
        for predicate in filters:
            if not callable(predicate):
                raise ConfigurationError(f"filter is not callable: {predicate!r}")
        # frozen なので object.__setattr__ で読み取り専用コピーに差し替え
        object.__setattr__(self, "field_overrides", MappingProxyType(dict(self.field_overrides)))
        object.__setattr__(self, "filters", filters)


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for an import run."""
    sheets: dict[str, SheetConfig]  # sheet name (config key) -> worksheet config
    feed_url_template: str | None = None  # None -> built-in cell feed template
    timeout: int = DEFAULT_TIMEOUT  # HTTP timeout seconds
