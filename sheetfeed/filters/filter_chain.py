"""
FilterChain for applying row predicates to an assembled worksheet table.

Predicates run in configured order over the column-label keyed rows that
remain after header extraction. A row survives only if every predicate
returns a truthy value.
"""

from __future__ import annotations

from collections.abc import Sequence
from logging import Logger
from types import MappingProxyType

from ..logging.init import get_logger
from ..models.config_models import RowPredicate
from .filter import FilterError

Table = dict[int, dict[str, str]]


def predicate_name(predicate: RowPredicate) -> str:
    """Best-effort display name for a filter or plain callable."""
    name = getattr(predicate, "name", None)
    if isinstance(name, str) and name:
        return name
    return getattr(predicate, "__name__", None) or predicate.__class__.__name__


class FilterChain:
    """
    Ordered chain of row predicates.

    Accepts Filter instances as well as plain functions, lambdas or any other
    callable taking a row mapping.
    """

    def __init__(self, filters: Sequence[RowPredicate] = (), logger: Logger | None = None) -> None:
        self.filters: list[RowPredicate] = list(filters)
        self.logger = logger or get_logger()

    def __len__(self) -> int:
        return len(self.filters)

    def apply(self, table: Table) -> Table:
        """
        Return a new table holding only the rows every predicate keeps.

        Row numbers are preserved; renumbering happens later.

        Raises:
            FilterError: if a predicate raises while evaluating a row
        """
        if not self.filters:
            return dict(table)

        rows = dict(table)
        for predicate in self.filters:
            name = predicate_name(predicate)
            kept: Table = {}
            for row_number, row in rows.items():
                try:
                    keep = predicate(MappingProxyType(row))
                except Exception as e:
                    raise FilterError(name, f"failed on row {row_number}: {e}", cause=e) from e
                if keep:
                    kept[row_number] = row
            dropped = len(rows) - len(kept)
            if dropped:
                self.logger.debug(f"filter '{name}' dropped {dropped} of {len(rows)} rows")
            rows = kept
        return rows
