from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from ..models.cell import RawCell, SkippedCell
from ..models.feed import FeedEntry
from .address import AddressFormatError, column_index, parse_address

"""Worksheet table assembly.

The cell feed delivers addressed cells in no particular order. This module
rebuilds a sparse table from them and shapes it into records:

1. cells_from_entries  - parse each entry's address label (bad labels skipped)
2. assemble_table      - row number -> column label -> content
3. extract_header      - lift the header row out as column label -> field name
4. (row filters run here, see sheetfeed.filters)
5. build_records       - renumber to a zero-based list of field-keyed records

Row numbers stay as labeled in the feed until step 5 so that the header row
can be located exactly and filters never see it.
"""

__all__ = [
    "Table",
    "HeaderMap",
    "cells_from_entries",
    "assemble_table",
    "extract_header",
    "build_records",
    "key_collisions",
    "build_field_catalog",
]

Table = dict[int, dict[str, str]]
HeaderMap = dict[str, str]


def cells_from_entries(entries: Iterable[FeedEntry]) -> tuple[list[RawCell], list[SkippedCell]]:
    """Parse feed entries into RawCells.

    An entry with a malformed location label does not abort the load: it is
    collected in the second list so the caller can warn about it.
    """
    cells: list[RawCell] = []
    skipped: list[SkippedCell] = []
    for entry in entries:
        try:
            column, row = parse_address(entry.label)
        except AddressFormatError as e:
            skipped.append(SkippedCell(label=str(entry.label), content=entry.content, reason=str(e)))
            continue
        cells.append(RawCell(column_label=column, row_number=row, content=entry.content))
    return cells, skipped


def assemble_table(cells: Iterable[RawCell]) -> Table:
    """Build the sparse row-major table. Last write wins on duplicate coordinates."""
    table: Table = {}
    for cell in cells:
        table.setdefault(cell.row_number, {})[cell.column_label] = cell.content
    return table


def extract_header(table: Mapping[int, Mapping[str, str]], header_row_index: int) -> tuple[HeaderMap, Table]:
    """Split the header row from the data rows.

    Returns:
        (header map, data table). The header map is empty when header_row_index
        is 0 or the row is absent; in that case every row stays data. The input
        table is left untouched.
    """
    data: Table = {row_number: dict(row) for row_number, row in table.items()}
    if header_row_index <= 0 or header_row_index not in data:
        return {}, data
    header_row = data.pop(header_row_index)
    # 空文字のフィールド名も許容 (マッピング側の設定問題として扱う)
    header: HeaderMap = {column: (content or "").strip() for column, content in header_row.items()}
    return header, data


def _column_sort_key(column: str) -> int:
    return column_index(column)


def build_records(table: Mapping[int, Mapping[str, str]], header: Mapping[str, str]) -> tuple[Mapping[str, str], ...]:
    """Renumber the (filtered) table into zero-based read-only records.

    Rows are ordered by their feed row number and columns by position. A column
    with a header entry is keyed by its field name, otherwise by its label.
    """
    records: list[Mapping[str, str]] = []
    for row_number in sorted(table):
        row = table[row_number]
        record: dict[str, str] = {}
        for column in sorted(row, key=_column_sort_key):
            record[header.get(column, column)] = row[column]
        records.append(MappingProxyType(record))
    return tuple(records)


def key_collisions(table: Mapping[int, Mapping[str, str]], header: Mapping[str, str]) -> dict[str, list[str]]:
    """Record keys that more than one data column maps to.

    Returns key -> columns in sheet order. In build_records the last of those
    columns wins when a row holds several of them.
    """
    columns = {column for row in table.values() for column in row}
    by_key: dict[str, list[str]] = {}
    for column in sorted(columns, key=_column_sort_key):
        by_key.setdefault(header.get(column, column), []).append(column)
    return {key: cols for key, cols in by_key.items() if len(cols) > 1}


def build_field_catalog(header: Mapping[str, str], overrides: Mapping[str, str]) -> dict[str, str]:
    """Merge field overrides over the header-derived catalog.

    Header fields describe themselves (``{name: name}``); overrides replace
    same-named entries and add new ones.
    """
    catalog: dict[str, str] = {}
    for column in sorted(header, key=_column_sort_key):
        name = header[column]
        catalog[name] = name
    catalog.update(overrides)
    return catalog
