"""Memory-bounded streaming reader for XLSX worksheets.

Reads the first worksheet of an XLSX container as rows keyed by the header
row, without loading the workbook into memory:

- two sequential passes over the zip container (shared strings, then rows)
- lazy, single-pass row generator with optional cancellation
- optional header allow-list restricting the output schema
- raw text values; no numeric or date coercion

Every row carries the same keys in header order, with None for absent cells.
"""

from __future__ import annotations

# Errors
from xlsx_stream._exceptions import (
    ContainerReadError,
    DecodingError,
    SharedStringIndexError,
    WorkbookReadError,
    XlsxStreamError,
)

# Configuration
from xlsx_stream.config import (
    DEFAULT_CHUNK_SIZE,
    XlsxStreamSettings,
    load_reader_settings,
)

# Readers
from xlsx_stream.readers import RowReaderProtocol, XlsxReader

# Types
from xlsx_stream.types import (
    CellKind,
    CellValue,
    DecodedCell,
    DecoderState,
    XlsxRow,
    XlsxRows,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "CellKind",
    "CellValue",
    "ContainerReadError",
    "DecodedCell",
    "DecoderState",
    "DecodingError",
    "RowReaderProtocol",
    "SharedStringIndexError",
    "WorkbookReadError",
    "XlsxReader",
    "XlsxRow",
    "XlsxRows",
    "XlsxStreamError",
    "XlsxStreamSettings",
    "load_reader_settings",
]
