"""Reader classes for spreadsheet containers.

Provides the streaming XLSX reader and its typed protocol.
"""

from __future__ import annotations

from xlsx_stream.readers.base import RowReaderProtocol
from xlsx_stream.readers.xlsx import XlsxReader

__all__ = [
    "RowReaderProtocol",
    "XlsxReader",
]
