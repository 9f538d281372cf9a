from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display service with tqdm (TTY only).

- a single tqdm instance per sheet, disabled when stdout is not a TTY
- the bar counts records handed to the sink; its total is the source's count()
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Check if TTY output is enabled.

    Returns:
        True if stdout is a TTY and progress should be displayed, False otherwise
    """
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress tracker using tqdm for draining one record source.

    In non-TTY environments (CI), progress bars are disabled to avoid
    ANSI control sequence spam.
    """

    def __init__(self, total_records: int, *, description: str = "Importing records") -> None:
        """Initialize progress tracker.

        Args:
            total_records: Number of records the pass will yield
            description: Description for the progress bar
        """
        self.total_records = total_records
        self.description = description
        self.processed = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_records,
                desc=description,
                unit="row",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, n: int = 1) -> None:
        """Record that n more records were processed."""
        self.processed += n
        if self.enabled and self.pbar is not None:
            self.pbar.update(n)

    def set_postfix(self, **kwargs: Any) -> None:
        """Set postfix information (stats) on the progress bar."""
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        """Close the progress bar."""
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
