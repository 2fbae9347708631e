"""Streaming XLSX reader implementation.

Reads the first worksheet of an XLSX container as header-keyed rows in two
sequential passes over the zip file:

1. locate ``xl/sharedStrings.xml`` and decode the shared-string table;
2. reopen the container, locate the first ``xl/worksheets/sheet*`` entry and
   decode rows lazily with RowDecoder.

The reader holds only immutable configuration. All decode state lives in the
generator of a single call, so one reader can be reused across files.
"""

from __future__ import annotations

from collections.abc import Callable, Generator, Iterable
from contextlib import contextmanager
from pathlib import Path

from xlsx_stream._container import (
    SHARED_STRINGS_ENTRY,
    WORKSHEET_ENTRY_PREFIX,
    exact_name,
    find_entry,
    name_prefix,
    open_container,
)
from xlsx_stream._decoders.rows import RowDecoder
from xlsx_stream._decoders.shared_strings import SharedStringTable, parse_shared_strings
from xlsx_stream._exceptions import WorkbookReadError
from xlsx_stream._protocols.polars import PolarsDataFrameProtocol, _create_string_frame
from xlsx_stream.config import DEFAULT_CHUNK_SIZE, XlsxStreamSettings
from xlsx_stream.logging import LogEventFields, get_logger
from xlsx_stream.types.xlsx import XlsxRow, XlsxRows

_logger = get_logger(__name__)


def _is_xlsx_file(path: Path) -> bool:
    """Check if path is an XLSX container file."""
    return path.is_file() and path.suffix.lower() in (".xlsx", ".xlsm")


def _require_file(path: Path) -> None:
    if not path.exists():
        raise WorkbookReadError(str(path), "File does not exist")
    if not path.is_file():
        raise WorkbookReadError(str(path), "Not a file")


class XlsxReader:
    """Memory-bounded reader for the first worksheet of an XLSX file.

    The first row of the worksheet supplies the column headers. Every row
    produced carries one key per header (in header order), with None for
    cells the row does not contain. Values are raw text.

    All methods raise exceptions on failure - no recovery or fallbacks.
    """

    __slots__ = ("_chunk_size", "_columns")

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        columns: Iterable[str] | None = None,
    ) -> None:
        """Configure the reader.

        Args:
            chunk_size: Read granularity in bytes for file and XML parsing.
            columns: Optional allow-list of header names (exact match).
                When given, only these columns appear in the output.

        Raises:
            ValueError: If chunk_size is not a positive integer, or columns
                is a single string instead of a collection of names.
        """
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
            raise ValueError(f"chunk_size must be a positive integer, got {chunk_size!r}")
        if isinstance(columns, str):
            raise ValueError(f"columns must be a collection of header names, got {columns!r}")
        self._chunk_size = chunk_size
        self._columns: frozenset[str] | None = frozenset(columns) if columns is not None else None

    @classmethod
    def from_settings(cls, settings: XlsxStreamSettings) -> XlsxReader:
        """Build a reader from loaded settings."""
        reader_cfg = settings["reader"]
        return cls(chunk_size=reader_cfg["chunk_size"], columns=reader_cfg["columns"])

    @property
    def chunk_size(self) -> int:
        """Configured read granularity in bytes."""
        return self._chunk_size

    @property
    def columns(self) -> frozenset[str] | None:
        """Configured allow-list, or None when all columns are read."""
        return self._columns

    def supports_format(self, path: Path) -> bool:
        """Check if path is an XLSX file.

        Args:
            path: Path to check.

        Returns:
            True if path is an existing .xlsx or .xlsm file.
        """
        return _is_xlsx_file(path)

    def _load_shared_strings(self, path: Path) -> SharedStringTable:
        """First pass: decode the shared-string table, then release the container."""
        with (
            open_container(path, self._chunk_size) as archive,
            find_entry(archive, exact_name(SHARED_STRINGS_ENTRY), path) as entry,
        ):
            if entry is None:
                _logger.debug("no shared strings part", extra={"path": str(path)})
                return SharedStringTable.empty()
            table = parse_shared_strings(entry.stream, self._chunk_size, entry.name)
        _logger.debug(
            "shared strings decoded",
            extra={"path": str(path), "shared_strings": len(table)},
        )
        return table

    @contextmanager
    def _open_worksheet(
        self,
        path: Path,
        should_stop: Callable[[], bool] | None = None,
    ) -> Generator[RowDecoder | None, None, None]:
        """Second pass: a RowDecoder over the first worksheet, or None."""
        _require_file(path)
        table = self._load_shared_strings(path)
        with (
            open_container(path, self._chunk_size) as archive,
            find_entry(archive, name_prefix(WORKSHEET_ENTRY_PREFIX), path) as entry,
        ):
            if entry is None:
                _logger.info("no worksheet part", extra={"path": str(path)})
                yield None
                return
            yield RowDecoder(
                entry.stream,
                table,
                allowed=self._columns,
                chunk_size=self._chunk_size,
                source=entry.name,
                should_stop=should_stop,
            )

    def iter_rows(
        self,
        path: Path | str,
        should_stop: Callable[[], bool] | None = None,
    ) -> Generator[XlsxRow, None, None]:
        """Lazily yield data rows of the first worksheet.

        Nothing is opened until the first row is requested. The worksheet
        handle stays open until the generator is exhausted or closed.

        Args:
            path: Path to XLSX file.
            should_stop: Optional callback checked after each row; returning
                True ends the iteration early.

        Yields:
            Row dictionaries with identical key sets in header order.

        Raises:
            WorkbookReadError: If the path does not exist or is not a file.
            ContainerReadError: If the file is not a readable zip container.
            DecodingError: If a consumed part is malformed.
            SharedStringIndexError: If a cell references a missing shared string.
        """
        file_path = Path(path)
        with self._open_worksheet(file_path, should_stop) as decoder:
            if decoder is None:
                return
            rows = decoder.rows()
            try:
                yield from rows
            finally:
                rows.close()
                fields: LogEventFields = {
                    "path": str(file_path),
                    "rows": decoder.rows_emitted,
                    "state": decoder.state,
                }
                _logger.debug("worksheet pass finished", extra=fields)

    def read(self, path: Path | str) -> XlsxRows:
        """Read all data rows of the first worksheet.

        Args:
            path: Path to XLSX file.

        Returns:
            List of row dictionaries. Nothing is returned if any row fails.

        Raises:
            WorkbookReadError: If the path does not exist or is not a file.
            ContainerReadError: If the file is not a readable zip container.
            DecodingError: If a consumed part is malformed.
            SharedStringIndexError: If a cell references a missing shared string.
        """
        rows = list(self.iter_rows(path))
        fields: LogEventFields = {"path": str(path), "rows": len(rows)}
        _logger.info("workbook read", extra=fields)
        return rows

    def read_columns(self, path: Path | str) -> list[str]:
        """Return the header names the reader would emit for ``path``.

        Decodes only up to the header row of the first worksheet.

        Args:
            path: Path to XLSX file.

        Returns:
            Header names after allow-list filtering, in header order.
        """
        with self._open_worksheet(Path(path)) as decoder:
            if decoder is None:
                return []
            return list(decoder.read_header().names)

    def read_frame(self, path: Path | str) -> PolarsDataFrameProtocol:
        """Read the first worksheet into a polars DataFrame of strings.

        Args:
            path: Path to XLSX file.

        Returns:
            DataFrame with one String column per header; the schema is kept
            even when the sheet has no data rows.
        """
        with self._open_worksheet(Path(path)) as decoder:
            if decoder is None:
                return _create_string_frame([], [])
            rows = list(decoder.rows())
            return _create_string_frame(rows, decoder.columns)


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "XlsxReader",
]
