from __future__ import annotations

import re

"""Cell address parsing for cell-feed worksheets.

A cell feed labels every entry with its location, e.g. ``B7`` or ``aa12``.
This module converts those labels into ``(column_label, row_number)`` pairs
and back. Row numbers are 1-based as labeled in the source feed.
"""

__all__ = [
    "AddressFormatError",
    "parse_address",
    "format_address",
    "column_index",
    "column_label",
]

_ADDRESS_RE = re.compile(r"^([A-Za-z]+)([0-9]+)$")
_COLUMN_RE = re.compile(r"^[A-Za-z]+$")


class AddressFormatError(ValueError):
    """Raised when a cell location label is not letters followed by digits."""


def parse_address(label: str) -> tuple[str, int]:
    """Parse a cell location label into ``(column_label, row_number)``.

    The column label is returned upper-cased. Surrounding whitespace is ignored.

    Raises:
        AddressFormatError: label does not match letters+digits, or row is 0

    Examples:
        >>> parse_address("B7")
        ('B', 7)
        >>> parse_address("ab12")
        ('AB', 12)
    """
    if not isinstance(label, str):
        raise AddressFormatError(f"cell address must be a string: {label!r}")
    match = _ADDRESS_RE.match(label.strip())
    if match is None:
        raise AddressFormatError(f"invalid cell address: {label!r}")
    column, digits = match.groups()
    row = int(digits)
    if row < 1:
        # 行番号は 1 始まり
        raise AddressFormatError(f"invalid cell address (row must be >= 1): {label!r}")
    return column.upper(), row


def format_address(column: str, row: int) -> str:
    """Inverse of :func:`parse_address`."""
    if not _COLUMN_RE.match(column or ""):
        raise AddressFormatError(f"invalid column label: {column!r}")
    if row < 1:
        raise AddressFormatError(f"row must be >= 1: {row}")
    return f"{column.upper()}{row}"


def column_index(column: str) -> int:
    """Return the 1-based position of a column label (A=1, Z=26, AA=27)."""
    if not _COLUMN_RE.match(column or ""):
        raise AddressFormatError(f"invalid column label: {column!r}")
    index = 0
    for ch in column.upper():
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index


def column_label(index: int) -> str:
    """Return the column label for a 1-based position (bijective base-26)."""
    if index < 1:
        raise AddressFormatError(f"column index must be >= 1: {index}")
    letters: list[str] = []
    while index > 0:
        index, rem = divmod(index - 1, 26)
        letters.append(chr(ord("A") + rem))
    return "".join(reversed(letters))
