from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result models for an import run.

This module defines the models for aggregating per-sheet outcomes and
run-level metrics that feed the SUMMARY output line.
"""

__all__ = [
    "SheetStat",
    "ProcessingResult",
]


@dataclass(frozen=True)
class SheetStat:
    """Per-sheet statistics (internal helper for ProcessingResult)."""
    sheet_name: str  # config 上のシート名
    status: str  # success/failed
    identity: str  # "<title> (<updated>)" of the loaded feed
    imported_rows: int  # records handed to the sink
    skipped_cells: int  # malformed cell addresses dropped while loading
    filtered_rows: int  # rows rejected by the filter chain
    elapsed_seconds: float
    error: str | None = None
    columns: tuple[str, ...] = ()  # header field names, in sheet order


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results for the SUMMARY output line."""
    success_sheets: int
    failed_sheets: int
    total_rows: int
    skipped_cells: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float
    sheet_stats: list[SheetStat] | None = None
