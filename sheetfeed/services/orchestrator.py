from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime

from ..feed.address import column_index
from ..feed.fetcher import FEED_URL_TEMPLATE, FeedFetcher
from ..logging.error_log import SHEET_LEVEL, ErrorLogBuffer, ErrorRecord
from ..models.config_models import ConfigurationError, ImportConfig
from ..models.processing_result import ProcessingResult, SheetStat
from ..source.adapter import SpreadsheetSource
from ..source.protocol import RecordSource
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Service orchestration for an import run.

Coordinates one run over every configured sheet: build a SpreadsheetSource per
sheet, load it, drain it with rewind()/next() into a sink, collect per-sheet
stats and return a ProcessingResult.

The sink stands in for the destination side of the import pipeline. With
sink=None the run only counts records (dry run).
"""

RecordSink = Callable[[str, Mapping[str, str]], None]


class ProcessingError(Exception):
    """Base exception for fatal processing errors."""
    pass


def build_sources(
    config: ImportConfig,
    fetcher: FeedFetcher | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> dict[str, SpreadsheetSource]:
    """Create one SpreadsheetSource per configured sheet (config order).

    Raises:
        ProcessingError: a sheet cannot be turned into a source
    """
    template = config.feed_url_template or FEED_URL_TEMPLATE
    shared_fetcher = fetcher if fetcher is not None else FeedFetcher(timeout=config.timeout)
    sources: dict[str, SpreadsheetSource] = {}
    for sheet_name, sheet_config in config.sheets.items():
        try:
            sources[sheet_name] = SpreadsheetSource(
                sheet_config,
                name=sheet_name,
                fetcher=shared_fetcher,
                url_template=template,
                error_log=error_log,
            )
        except ConfigurationError as e:
            raise ProcessingError(f"Invalid configuration for sheet '{sheet_name}': {e}") from e
    return sources


def drain_source(
    sheet_name: str,
    source: RecordSource,
    sink: RecordSink | None,
    error_log: ErrorLogBuffer,
) -> tuple[int, str | None]:
    """Hand every record of an already loaded source to the sink.

    Returns:
        (records handed over, error message or None)
    """
    imported = 0
    with ProgressTracker(source.count(), description=f"Importing {sheet_name}") as progress:
        source.rewind()
        while (record := source.next()) is not None:
            if sink is not None:
                try:
                    sink(sheet_name, record)
                except Exception as e:
                    message = f"sink failed on record {imported}: {e}"
                    error_log.append(
                        ErrorRecord.create(
                            sheet=sheet_name,
                            worksheet=getattr(getattr(source, "config", None), "worksheet_index", 0),
                            cell=SHEET_LEVEL,
                            error_type="SINK_ERROR",
                            message=message,
                        )
                    )
                    return imported, message
            imported += 1
            progress.advance()
        progress.set_postfix(rows=imported)
    return imported, None


def _header_columns(source: SpreadsheetSource) -> tuple[str, ...]:
    header = source.header_map()
    names = (header[column] for column in sorted(header, key=column_index))
    return tuple(dict.fromkeys(names))


def import_sheet(
    sheet_name: str,
    source: SpreadsheetSource,
    sink: RecordSink | None,
    error_log: ErrorLogBuffer,
) -> SheetStat:
    """Load one source and drain it. Never raises for load or sink failures."""
    start = datetime.now(UTC)

    if not source.load():
        failure = source.last_failure
        return SheetStat(
            sheet_name=sheet_name,
            status="failed",
            identity=source.identity(),
            imported_rows=0,
            skipped_cells=0,
            filtered_rows=0,
            elapsed_seconds=(datetime.now(UTC) - start).total_seconds(),
            error=failure.describe() if failure is not None else "load failed",
        )

    snapshot = source.snapshot
    skipped = len(snapshot.skipped_cells) if snapshot is not None else 0
    filtered = snapshot.filtered_rows if snapshot is not None else 0

    imported, error = drain_source(sheet_name, source, sink, error_log)
    if error is not None:
        logger.debug(f"sheet '{sheet_name}' failed while draining: {error}")

    return SheetStat(
        sheet_name=sheet_name,
        status="failed" if error is not None else "success",
        identity=source.identity(),
        imported_rows=imported,
        skipped_cells=skipped,
        filtered_rows=filtered,
        elapsed_seconds=(datetime.now(UTC) - start).total_seconds(),
        error=error,
        columns=_header_columns(source),
    )


def import_all(
    config: ImportConfig,
    sink: RecordSink | None = None,
    fetcher: FeedFetcher | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Import every configured sheet.

    A failing sheet (fetch, parse, filter or sink error) is counted as failed
    and the run continues with the next sheet.

    Args:
        config: Import configuration
        sink: Receives (sheet name, record) for each record; None = dry run
        fetcher: Feed fetcher shared by all sheets (requests-based default)
        error_log: Error buffer; a new one (flushed at the end) if omitted

    Returns:
        ProcessingResult with aggregated metrics and per-sheet stats

    Raises:
        ProcessingError: For fatal errors that prevent processing
    """
    start_time = datetime.now(UTC)
    log_buffer = error_log if error_log is not None else ErrorLogBuffer()

    sources = build_sources(config, fetcher=fetcher, error_log=log_buffer)

    sheet_stats: list[SheetStat] = []
    success_count = 0
    failed_count = 0
    total_rows = 0
    total_skipped = 0

    for sheet_name, source in sources.items():
        stat = import_sheet(sheet_name, source, sink, log_buffer)
        sheet_stats.append(stat)
        if stat.status == "success":
            success_count += 1
        else:
            failed_count += 1
        total_rows += stat.imported_rows
        total_skipped += stat.skipped_cells

    # Flush error log once per run
    if error_log is None:
        try:
            log_buffer.flush()
        except OSError as e:
            logger.debug(f"error log flush failed: {e}")

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput_rps = total_rows / elapsed_seconds if elapsed_seconds > 0 else 0.0

    return ProcessingResult(
        success_sheets=success_count,
        failed_sheets=failed_count,
        total_rows=total_rows,
        skipped_cells=total_skipped,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput_rps,
        sheet_stats=sheet_stats,
    )
