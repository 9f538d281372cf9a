from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from logging import Logger
from types import MappingProxyType

from ..feed.fetcher import FEED_URL_TEMPLATE, FeedFetcher, FetchError, ParseError, build_feed_url
from ..feed.table import (
    assemble_table,
    build_field_catalog,
    build_records,
    cells_from_entries,
    extract_header,
    key_collisions,
)
from ..filters.filter import FilterError
from ..filters.filter_chain import FilterChain
from ..logging.error_log import SHEET_LEVEL, ErrorLogBuffer, ErrorRecord
from ..logging.init import get_logger
from ..models.cell import SkippedCell
from ..models.config_models import DEFAULT_TIMEOUT, ConfigurationError, SheetConfig
from ..models.feed import ParsedFeed
from ..models.sheet_state import LoadedSheet, LoadFailure
from .cursor import CursorState, RecordCursor

"""Spreadsheet worksheet exposed as a record source.

SpreadsheetSource wires the pieces together:

    feed URL -> fetch/parse -> cells -> table -> header split -> filters
             -> zero-based records + field catalog

and presents the result through the RecordSource interface
(fields/load/rewind/next/count/identity).

load() never raises. Every load-time problem becomes a False return value,
an ERROR line on the application logger and a LoadFailure in last_failure,
while the previously loaded snapshot stays in place.
"""

__all__ = [
    "SpreadsheetSource",
]


class SpreadsheetSource:
    """One worksheet of a published spreadsheet, as rewindable records."""

    def __init__(
        self,
        config: SheetConfig,
        *,
        name: str | None = None,
        fetcher: FeedFetcher | None = None,
        url_template: str = FEED_URL_TEMPLATE,
        timeout: int = DEFAULT_TIMEOUT,
        error_log: ErrorLogBuffer | None = None,
        logger: Logger | None = None,
    ) -> None:
        """
        Args:
            config: Worksheet configuration
            name: Display name used in logs and the error log (defaults to feed key)
            fetcher: Feed fetcher; a requests-based FeedFetcher if omitted
            url_template: Feed URL pattern with {key} and {worksheet}
            timeout: HTTP timeout for the default fetcher
            error_log: Optional buffer receiving structured error records

        Raises:
            ConfigurationError: config is not a SheetConfig or the template is unusable
        """
        if not isinstance(config, SheetConfig):
            raise ConfigurationError(f"expected SheetConfig, got {type(config).__name__}")
        try:
            self._feed_url = build_feed_url(config.feed_key, config.worksheet_index, url_template)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        self.config = config
        self.name = name or config.feed_key
        self._fetcher = fetcher if fetcher is not None else FeedFetcher(timeout=timeout)
        self._error_log = error_log
        self.logger = logger or get_logger()

        self._snapshot: LoadedSheet | None = None
        self._cursor = RecordCursor()
        self._load_lock = threading.Lock()
        self.last_failure: LoadFailure | None = None

    # ------------------------------------------------------------------
    # state
    @property
    def feed_url(self) -> str:
        return self._feed_url

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def snapshot(self) -> LoadedSheet | None:
        return self._snapshot

    @property
    def skipped_cells(self) -> tuple[SkippedCell, ...]:
        return self._snapshot.skipped_cells if self._snapshot is not None else ()

    @property
    def state(self) -> CursorState:
        return self._cursor.state

    @property
    def position(self) -> int:
        return self._cursor.position

    # ------------------------------------------------------------------
    # schema
    def fields(self) -> dict[str, str]:
        """Field name -> description. Overrides only until the first successful load."""
        if self._snapshot is None:
            return dict(self.config.field_overrides)
        return dict(self._snapshot.catalog)

    def header_map(self) -> dict[str, str]:
        """Column label -> field name from the header row (empty without one)."""
        if self._snapshot is None:
            return {}
        return dict(self._snapshot.header_map)

    # ------------------------------------------------------------------
    # loading
    def load(self) -> bool:
        """Fetch the worksheet and replace the loaded snapshot as a whole.

        Returns:
            True on success. False if the feed could not be fetched or parsed,
            a filter failed, or another load is already running.
        """
        if not self._load_lock.acquire(blocking=False):
            self._fail("LOAD_IN_PROGRESS", "another load of this source is already running")
            return False
        try:
            try:
                feed = self._fetcher.fetch(self._feed_url)
            except FetchError as e:
                self._fail("FETCH_ERROR", e.message, e.status)
                return False
            except ParseError as e:
                self._fail("PARSE_ERROR", str(e))
                return False

            try:
                snapshot = self._build_snapshot(feed)
            except FilterError as e:
                self._fail("FILTER_ERROR", str(e))
                return False

            # 一括差し替え: 読み手が見るのは常に完全な snapshot
            self._snapshot = snapshot
            self.last_failure = None
            self.logger.info(
                f"loaded sheet '{self.name}' worksheet {self.config.worksheet_index}: "
                f"{len(snapshot.records)} records, {len(snapshot.catalog)} fields, "
                f"{snapshot.filtered_rows} filtered, {len(snapshot.skipped_cells)} skipped cells"
            )
            return True
        except Exception as e:
            # fetcher 差し替え時などの想定外エラーもロード失敗として扱う
            self.logger.debug(f"unexpected load error for sheet '{self.name}'", exc_info=True)
            self._fail("LOAD_ERROR", f"{type(e).__name__}: {e}")
            return False
        finally:
            self._load_lock.release()

    def _build_snapshot(self, feed: ParsedFeed) -> LoadedSheet:
        cells, skipped = cells_from_entries(feed.entries)
        for cell in skipped:
            self._warn_skipped(cell)

        table = assemble_table(cells)
        header, data = extract_header(table, self.config.header_row_index)
        kept = FilterChain(self.config.filters, logger=self.logger).apply(data)
        for key, columns in key_collisions(kept, header).items():
            self.logger.warning(
                f"columns {', '.join(columns)} of worksheet {self.config.worksheet_index} "
                f"in sheet '{self.name}' all map to field '{key}'; the last column wins"
            )
        records = build_records(kept, header)
        catalog = build_field_catalog(header, self.config.field_overrides)

        return LoadedSheet(
            title=feed.title,
            updated=feed.updated,
            header_map=MappingProxyType(header),
            catalog=MappingProxyType(catalog),
            records=records,
            skipped_cells=tuple(skipped),
            filtered_rows=len(data) - len(kept),
        )

    def _warn_skipped(self, cell: SkippedCell) -> None:
        self.logger.warning(
            f"skipping cell '{cell.label}' in worksheet {self.config.worksheet_index} "
            f"of sheet '{self.name}': {cell.reason}"
        )
        if self._error_log is not None:
            self._error_log.append(
                ErrorRecord.create(
                    sheet=self.name,
                    worksheet=self.config.worksheet_index,
                    cell=cell.label or SHEET_LEVEL,
                    error_type="INVALID_CELL_ADDRESS",
                    message=cell.reason,
                )
            )

    def _fail(self, error_type: str, message: str, status: int | None = None) -> None:
        failure = LoadFailure(
            feed_key=self.config.feed_key,
            worksheet_index=self.config.worksheet_index,
            error_type=error_type,
            message=message,
            status=status,
        )
        self.last_failure = failure
        self.logger.error(failure.describe())
        if self._error_log is not None:
            self._error_log.append(
                ErrorRecord.create(
                    sheet=self.name,
                    worksheet=self.config.worksheet_index,
                    cell=SHEET_LEVEL,
                    error_type=error_type,
                    message=message if status is None else f"status={status} {message}",
                )
            )

    # ------------------------------------------------------------------
    # iteration
    def rewind(self) -> None:
        self._cursor.rewind()

    def next(self) -> Mapping[str, str] | None:
        """Return the next record, or None once the pass is exhausted."""
        records = self._snapshot.records if self._snapshot is not None else ()
        return self._cursor.advance(records)

    def count(self) -> int:
        if self._snapshot is None:
            return 0
        return len(self._snapshot.records)

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[Mapping[str, str]]:
        """Rewind and drain. Shares the source's cursor."""
        self.rewind()
        while (record := self.next()) is not None:
            yield record

    # ------------------------------------------------------------------
    # metadata
    def identity(self) -> str:
        """``"<title> (<updated>)"`` of the loaded feed."""
        if self._snapshot is None:
            return f"{self.config.feed_key}/{self.config.worksheet_index} (not loaded)"
        return f"{self._snapshot.title} ({self._snapshot.updated})"

    def get_worksheet_title(self) -> str:
        """Worksheet title as reported by the feed ("" before the first load)."""
        if self._snapshot is None:
            return ""
        return self._snapshot.title

    def __str__(self) -> str:
        return self.identity()

    def __repr__(self) -> str:
        return (
            f"SpreadsheetSource(name='{self.name}', worksheet={self.config.worksheet_index}, "
            f"loaded={self.is_loaded})"
        )
