from __future__ import annotations

from dataclasses import dataclass

"""Cell-level models for the feed -> table assembly step.

RawCell is transient: produced from a feed entry once its address label is
parsed, consumed immediately by the table assembler. SkippedCell keeps the
entries whose address label could not be parsed, for warning output.
"""

__all__ = [
    "RawCell",
    "SkippedCell",
]


@dataclass(frozen=True)
class RawCell:
    """One addressed cell of a worksheet.

    The row_number refers to the row as labeled in the source feed (1-based).
    """
    column_label: str  # upper-cased letters, e.g. "B"
    row_number: int  # 1 始まり (feed 上の行番号)
    content: str


@dataclass(frozen=True)
class SkippedCell:
    """A feed entry dropped because its location label was malformed."""
    label: str
    content: str
    reason: str
