from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

This module defines the ErrorRecord dataclass used for structured error logging
while loading worksheet feeds. It supports cell="-" as a sentinel value for
sheet-level errors (fetch/parse/filter failures) where no single cell applies.
"""

__all__ = [
    "ErrorRecord",
    "SHEET_LEVEL",
]

SHEET_LEVEL = "-"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        sheet: Configured sheet name (config key)
        worksheet: Worksheet index within the spreadsheet
        cell: Cell location label, or "-" for sheet-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human-readable diagnostic
    """
    timestamp: str  # ISO8601 UTC
    sheet: str
    worksheet: int
    cell: str  # セル番地。シート単位のエラーは "-"
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(sheet: str, worksheet: int, cell: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord with current UTC timestamp.

        Parameters:
            sheet: Configured sheet name
            worksheet: Worksheet index within the spreadsheet
            cell: Cell location label, or "-" for sheet-level errors
            error_type: Error classification in UPPER_SNAKE_CASE format
            message: Human-readable diagnostic

        Returns:
            New ErrorRecord instance with current UTC timestamp
        """
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            sheet=sheet,
            worksheet=worksheet,
            cell=cell,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize ErrorRecord to JSON Lines format.

        Returns:
            JSON string representation without extra keys
        """
        return json.dumps(asdict(self), ensure_ascii=False)
