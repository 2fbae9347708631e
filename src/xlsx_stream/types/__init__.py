"""Type definitions for xlsx_stream data structures."""

from __future__ import annotations

from xlsx_stream.types.xlsx import (
    CellKind,
    CellValue,
    DecodedCell,
    DecoderState,
    XlsxRow,
    XlsxRows,
)

__all__ = [
    "CellKind",
    "CellValue",
    "DecodedCell",
    "DecoderState",
    "XlsxRow",
    "XlsxRows",
]
