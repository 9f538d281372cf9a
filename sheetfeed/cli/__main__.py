from __future__ import annotations

import argparse
import re
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv

from sheetfeed.config.loader import ConfigError, load_config
from sheetfeed.logging.init import enable_debug, log_summary, setup_logging
from sheetfeed.services.orchestrator import ProcessingError, build_sources, import_all
from sheetfeed.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (overrides process environment) and config/import.yml
- Load every configured worksheet feed and drain its records
- Optionally print a preview (--inspect-data) or write CSVs (--export-dir)
- Print a SUMMARY line and exit with 0 (all sheets ok), 2 (some failed), 1 (fatal)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

DEFAULT_CONFIG = Path("config/import.yml")
INSPECT_ROWS = 3
_UNSAFE_FILE_CHARS = re.compile(r"[^\w.-]+")


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv.

    override=True: values in .env win over variables already in the process.
    """
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Spreadsheet cell feed -> record import")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG, help="YAML config file")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print fields & first rows per sheet then exit")
    p.add_argument("--export-dir", type=Path, default=None, help="Write each sheet's records to <dir>/<sheet>.csv")
    return p.parse_args(argv)


def _inspect_data(cfg) -> int:
    sources = build_sources(cfg)
    failed = 0
    for sheet_name, source in sources.items():
        print(f"SHEET: {sheet_name} url={source.feed_url}")
        if not source.load():
            failed += 1
            print(f"  load_error: {source.last_failure.describe() if source.last_failure else 'unknown'}")
            continue
        print(f"  identity: {source.identity()}")
        print(f"  fields: {source.fields()}")
        print(f"  count: {source.count()}")
        sample = []
        source.rewind()
        while len(sample) < INSPECT_ROWS and (record := source.next()) is not None:
            sample.append(dict(record))
        if sample:
            print(pd.DataFrame(sample).to_string(index=False))
    return EXIT_PARTIAL_FAILURE if failed else EXIT_SUCCESS_ALL


class _CsvCollector:
    """Sink that keeps records per sheet and writes them with pandas.

    Sheets that loaded without records are registered so they still get a
    CSV holding only the header line.
    """

    def __init__(self) -> None:
        self.rows: dict[str, list[dict[str, str]]] = {}
        self.columns: dict[str, list[str]] = {}

    def __call__(self, sheet_name: str, record: Mapping[str, str]) -> None:
        self.rows.setdefault(sheet_name, []).append(dict(record))

    def register(self, sheet_name: str, columns: Sequence[str]) -> None:
        self.rows.setdefault(sheet_name, [])
        self.columns[sheet_name] = list(columns)

    def write(self, directory: Path) -> list[Path]:
        directory.mkdir(parents=True, exist_ok=True)
        written = []
        used: set[str] = set()
        for sheet_name, rows in self.rows.items():
            path = directory / _csv_file_name(sheet_name, used)
            if rows:
                frame = pd.DataFrame.from_records(rows)
            else:
                frame = pd.DataFrame(columns=self.columns.get(sheet_name, []))
            frame.to_csv(path, index=False)
            written.append(path)
        return written


def _csv_file_name(sheet_name: str, used: set[str]) -> str:
    """File name for a sheet; path separators and other unsafe characters become '_'."""
    stem = _UNSAFE_FILE_CHARS.sub("_", sheet_name).strip("._") or "sheet"
    name = f"{stem}.csv"
    n = 2
    while name.lower() in used:
        name = f"{stem}_{n}.csv"
        n += 1
    used.add(name.lower())
    return name


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む ([] はテストからの明示的な空引数)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        enable_debug()
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    logger.info(f"Processing {len(cfg.sheets)} sheet(s) from: {args.config}")

    try:
        if args.inspect_data:
            return _inspect_data(cfg)

        collector = _CsvCollector() if args.export_dir is not None else None
        result = import_all(cfg, sink=collector)
        if collector is not None:
            for stat in result.sheet_stats or []:
                if stat.status == "success":
                    collector.register(stat.sheet_name, stat.columns)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    if collector is not None:
        for path in collector.write(args.export_dir):
            logger.info(f"wrote {path}")

    summary_line = render_summary_line(len(cfg.sheets), result)
    # log_summary が "SUMMARY " を付けるので除去して渡す
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_sheets > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
