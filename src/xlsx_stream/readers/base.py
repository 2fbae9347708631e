"""Protocol definitions for reader interfaces.

Defines the typed contract that row reader implementations must fulfill.
No recovery, no best-effort - failures propagate as exceptions.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Protocol

from xlsx_stream.types.xlsx import XlsxRow, XlsxRows


class RowReaderProtocol(Protocol):
    """Protocol for reading header-keyed rows from spreadsheet files.

    All methods raise exceptions on failure - no recovery or fallbacks.
    """

    def supports_format(self, path: Path) -> bool:
        """Check if this reader supports the given path.

        Args:
            path: Path to check for format support.

        Returns:
            True if this reader can handle the format.
        """
        ...

    def iter_rows(
        self,
        path: Path | str,
        should_stop: Callable[[], bool] | None = None,
    ) -> Generator[XlsxRow, None, None]:
        """Lazily yield rows keyed by header name.

        Args:
            path: Path to spreadsheet file.
            should_stop: Optional cancellation callback checked between rows.

        Yields:
            Row dictionaries with identical key sets.
        """
        ...

    def read(self, path: Path | str) -> XlsxRows:
        """Read all rows keyed by header name.

        Args:
            path: Path to spreadsheet file.

        Returns:
            List of row dictionaries.
        """
        ...

    def read_columns(self, path: Path | str) -> list[str]:
        """Return header names in output order.

        Args:
            path: Path to spreadsheet file.

        Returns:
            Header names after filtering.
        """
        ...


__all__ = [
    "RowReaderProtocol",
]
