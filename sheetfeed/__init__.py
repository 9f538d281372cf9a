"""Spreadsheet cell feed -> record source for row-by-row import pipelines."""

from .models.config_models import ConfigurationError, SheetConfig
from .source.adapter import SpreadsheetSource

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "SheetConfig",
    "SpreadsheetSource",
    "__version__",
]
