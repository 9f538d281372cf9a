from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from sheetfeed.models.error_record import SHEET_LEVEL, ErrorRecord

"""Error log buffering module.

- JSON Lines, fixed schema (no extra keys)
- one `logs/errors-YYYYMMDD-HHMMSS.log` (UTC) per run, created on first flush
- records are buffered and written in one go on flush()
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "SHEET_LEVEL",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer for error records. Flush writes JSON Lines.

    - file path is decided on first access
    - no thread safety (one run = one thread)
    """
    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir if logs_dir is not None else LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[ErrorRecord]:
        return list(self._records)

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the log file. Nothing is created when empty."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
