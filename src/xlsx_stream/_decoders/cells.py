"""Cell decoding and value resolution.

A ``<c>`` element carries an optional reference (``r``), an optional type
(``t``) and a value sub-element. Shared-string cells hold a table index;
every other type is returned as raw text without coercion.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from xlsx_stream._decoders.columns import column_index
from xlsx_stream._decoders.shared_strings import SharedStringTable
from xlsx_stream._decoders.xml import joined_text, local_name
from xlsx_stream._exceptions import DecodingError
from xlsx_stream.types.xlsx import CellKind, CellValue, DecodedCell

SHARED_STRING_TYPE = "s"
INLINE_STRING_TYPE = "inlineStr"


def cell_column(cell: ET.Element, fallback_column: int) -> int:
    """Resolve a cell's 0-based column index.

    Args:
        cell: ``<c>`` element.
        fallback_column: Index to use when the cell has no ``r`` attribute.

    Returns:
        Column index from the reference, else the fallback.
    """
    reference = cell.get("r")
    if reference is None:
        return fallback_column
    return column_index(reference)


def _cell_kind(type_attr: str | None) -> CellKind:
    if type_attr == SHARED_STRING_TYPE:
        return "shared"
    if type_attr == INLINE_STRING_TYPE:
        return "inline"
    return "literal"


def _value_text(cell: ET.Element) -> str | None:
    for child in cell:
        if local_name(child.tag) == "v":
            return child.text or ""
    return None


def _inline_text(cell: ET.Element) -> str | None:
    for child in cell:
        if local_name(child.tag) == "is":
            return joined_text(child)
    return _value_text(cell)


def decode_cell(cell: ET.Element, column: int) -> DecodedCell:
    """Decode a ``<c>`` element whose column is already resolved.

    Args:
        cell: ``<c>`` element.
        column: 0-based column index from cell_column().

    Returns:
        DecodedCell with kind and raw payload.
    """
    kind = _cell_kind(cell.get("t"))
    raw = _inline_text(cell) if kind == "inline" else _value_text(cell)
    return DecodedCell(column=column, kind=kind, raw=raw)


def _parse_shared_index(raw: str) -> int:
    text = raw.strip()
    if not (text.isascii() and text.isdigit()):
        raise DecodingError("shared_string_index", f"Expected non-negative integer, got {raw!r}")
    return int(text)


def resolve_cell_value(cell: DecodedCell, table: SharedStringTable) -> CellValue:
    """Resolve a decoded cell to its text value.

    Args:
        cell: Decoded cell.
        table: Shared-string table for the workbook.

    Returns:
        Shared string for shared cells, raw text otherwise, None without a value.

    Raises:
        DecodingError: If a shared-string index is not a non-negative integer.
        SharedStringIndexError: If a shared-string index is out of range.
    """
    raw = cell["raw"]
    if raw is None:
        return None
    if cell["kind"] == "shared":
        return table.lookup(_parse_shared_index(raw))
    return raw


__all__ = [
    "INLINE_STRING_TYPE",
    "SHARED_STRING_TYPE",
    "cell_column",
    "decode_cell",
    "resolve_cell_value",
]
