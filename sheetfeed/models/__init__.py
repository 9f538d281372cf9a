"""Domain models for the spreadsheet cell-feed import source.

This package contains the dataclasses shared by the feed, source and service
layers.
"""

from .cell import RawCell, SkippedCell
from .config_models import ConfigurationError, ImportConfig, SheetConfig
from .error_record import ErrorRecord
from .feed import FeedEntry, ParsedFeed
from .processing_result import ProcessingResult, SheetStat
from .sheet_state import LoadedSheet, LoadFailure

__all__ = [
    # Configuration models
    "ConfigurationError",
    "ImportConfig",
    "SheetConfig",
    # Feed / table models
    "FeedEntry",
    "ParsedFeed",
    "RawCell",
    "SkippedCell",
    "LoadedSheet",
    "LoadFailure",
    # Reporting models
    "ErrorRecord",
    "ProcessingResult",
    "SheetStat",
]
