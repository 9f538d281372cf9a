from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

"""Capability interface consumed by the import pipeline.

Any object offering these methods can be drained by
sheetfeed.services.orchestrator; no base class is required.
"""

__all__ = [
    "RecordSource",
]


@runtime_checkable
class RecordSource(Protocol):
    """A loadable, rewindable, countable source of flat records."""

    def fields(self) -> dict[str, str]:
        """Field name -> description, used to validate field mappings."""
        ...

    def load(self) -> bool:
        """(Re)materialize the source. False on failure, previous data kept."""
        ...

    def rewind(self) -> None:
        ...

    def next(self) -> Mapping[str, str] | None:
        """Next record, or None when the pass is exhausted."""
        ...

    def count(self) -> int:
        ...

    def identity(self) -> str:
        """Change-detection key; differs whenever upstream content changes."""
        ...
