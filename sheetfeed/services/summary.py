from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""Summary line rendering service.

Format:
SUMMARY sheets={total}/{total} success={success} failed={failed} rows={rows}
skipped_cells={skipped} elapsed_sec={elapsed} throughput_rps={throughput}
"""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{value:.6f}".rstrip('0').rstrip('.')
    return str(round(value, 3))


def render_summary_line(total_sheets: int, result: ProcessingResult) -> str:
    """Render a SUMMARY line from ProcessingResult.

    Args:
        total_sheets: Number of sheets configured for the run
        result: ProcessingResult containing aggregated metrics

    Returns:
        Formatted SUMMARY line

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2023, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2023, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_sheets=1, failed_sheets=0, total_rows=1000,
        ...     skipped_cells=0, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, throughput_rows_per_sec=500.0
        ... )
        >>> render_summary_line(1, result)
        'SUMMARY sheets=1/1 success=1 failed=0 rows=1000 skipped_cells=0 elapsed_sec=2 throughput_rps=500'
    """
    elapsed_str = _format_number(result.elapsed_seconds)
    throughput_str = _format_number(result.throughput_rows_per_sec)

    return (
        f"SUMMARY sheets={total_sheets}/{total_sheets} "
        f"success={result.success_sheets} "
        f"failed={result.failed_sheets} "
        f"rows={result.total_rows} "
        f"skipped_cells={result.skipped_cells} "
        f"elapsed_sec={elapsed_str} "
        f"throughput_rps={throughput_str}"
    )
