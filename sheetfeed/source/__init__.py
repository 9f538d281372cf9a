"""Record source exposing a worksheet feed to the import pipeline."""

from .adapter import SpreadsheetSource
from .cursor import CursorState, RecordCursor
from .protocol import RecordSource

__all__ = [
    "CursorState",
    "RecordCursor",
    "RecordSource",
    "SpreadsheetSource",
]
