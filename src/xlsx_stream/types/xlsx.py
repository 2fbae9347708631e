"""XLSX type definitions for the streaming reader.

Provides type aliases and TypedDicts for decoded cells and assembled rows.

All values are raw text; no numeric or date coercion is performed.
"""

from __future__ import annotations

from typing import Literal, TypedDict

# Raw text payload of a cell, or None when the cell has no value
CellValue = str | None

# How a cell's payload is interpreted: shared-string index, inline text, raw literal
CellKind = Literal["shared", "inline", "literal"]

# RowDecoder lifecycle
DecoderState = Literal["awaiting_header", "streaming_rows", "done"]

# A single row: header name -> cell value, one key per mapped column
XlsxRow = dict[str, CellValue]

# Multiple rows forming a sheet
XlsxRows = list[XlsxRow]


class DecodedCell(TypedDict):
    """A cell element decoded from a worksheet row.

    Attributes:
        column: 0-based column index resolved from the cell reference.
        kind: Interpretation of the payload.
        raw: Text of the value element (or joined inline text), None if absent.
    """

    column: int
    kind: CellKind
    raw: str | None


__all__ = [
    "CellKind",
    "CellValue",
    "DecodedCell",
    "DecoderState",
    "XlsxRow",
    "XlsxRows",
]
