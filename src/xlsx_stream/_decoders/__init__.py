"""Decoders converting SpreadsheetML parts to typed structures.

Internal package: XML event helpers, the shared-string table, column
reference decoding, cell value resolution and the row state machine.
Import order follows the dependency order between the submodules.
"""

from __future__ import annotations

from xlsx_stream._decoders.xml import (
    iter_completed_elements,
    joined_text,
    local_name,
)
from xlsx_stream._decoders.shared_strings import (
    SharedStringTable,
    parse_shared_strings,
)
from xlsx_stream._decoders.columns import (
    ColumnIndexMap,
    build_column_map,
    column_index,
)
from xlsx_stream._decoders.cells import (
    cell_column,
    decode_cell,
    resolve_cell_value,
)
from xlsx_stream._decoders.rows import RowDecoder

__all__ = [
    "ColumnIndexMap",
    "RowDecoder",
    "SharedStringTable",
    "build_column_map",
    "cell_column",
    "column_index",
    "decode_cell",
    "iter_completed_elements",
    "joined_text",
    "local_name",
    "parse_shared_strings",
    "resolve_cell_value",
]
