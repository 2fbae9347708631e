"""Worksheet row decoding.

RowDecoder walks the ``<row>`` elements of a worksheet part. The first row
becomes the column map; every later row is emitted as a mapping with one key
per mapped header, absent cells filled with None.

State machine::

    awaiting_header --first row--> streaming_rows --end of input--> done
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Callable, Generator, Iterator
from typing import IO

from xlsx_stream._decoders.cells import cell_column, decode_cell, resolve_cell_value
from xlsx_stream._decoders.columns import ColumnIndexMap, build_column_map
from xlsx_stream._decoders.shared_strings import SharedStringTable
from xlsx_stream._decoders.xml import iter_completed_elements, local_name
from xlsx_stream.logging import get_logger
from xlsx_stream.types.xlsx import CellValue, DecoderState, XlsxRow

_ROW = frozenset({"row"})

_logger = get_logger(__name__)


def _iter_cells(row: ET.Element) -> Iterator[tuple[int, ET.Element]]:
    """Yield (column index, cell) for each ``<c>`` child in document order.

    A cell without a reference takes the column after the previous cell.
    """
    previous = -1
    for child in row:
        if local_name(child.tag) != "c":
            continue
        column = cell_column(child, previous + 1)
        previous = column
        yield column, child


class RowDecoder:
    """Pull-based decoder over one worksheet part.

    Rows are produced one at a time by rows(); nothing is decoded until the
    consumer asks for it, and closing the generator stops decoding.
    """

    def __init__(
        self,
        stream: IO[bytes],
        table: SharedStringTable,
        *,
        allowed: frozenset[str] | None,
        chunk_size: int,
        source: str,
        should_stop: Callable[[], bool] | None = None,
    ) -> None:
        self._table = table
        self._allowed = allowed
        self._source = source
        self._should_stop = should_stop
        self._elements = iter_completed_elements(stream, chunk_size, source, _ROW)
        self._state: DecoderState = "awaiting_header"
        self._column_map: ColumnIndexMap | None = None
        self._rows_started = False
        self._rows_emitted = 0

    @property
    def state(self) -> DecoderState:
        """Current decoder state."""
        return self._state

    @property
    def columns(self) -> list[str]:
        """Header names in first-seen order (empty before the header row)."""
        if self._column_map is None:
            return []
        return list(self._column_map.names)

    @property
    def rows_emitted(self) -> int:
        """Number of data rows yielded so far."""
        return self._rows_emitted

    def _decode_header(self, row: ET.Element) -> ColumnIndexMap:
        headers: list[tuple[int, CellValue]] = []
        for column, cell in _iter_cells(row):
            headers.append((column, resolve_cell_value(decode_cell(cell, column), self._table)))
        return build_column_map(headers, self._allowed)

    def read_header(self) -> ColumnIndexMap:
        """Decode up to and including the header row.

        Idempotent: later calls return the map built by the first one. A
        worksheet without rows yields an empty map and moves to ``done``.
        """
        if self._column_map is not None:
            return self._column_map
        for row in self._elements:
            self._column_map = self._decode_header(row)
            self._state = "streaming_rows"
            _logger.debug(
                "header row decoded",
                extra={"entry": self._source, "columns": list(self._column_map.names)},
            )
            return self._column_map
        self._column_map = ColumnIndexMap(())
        self._state = "done"
        return self._column_map

    def _assemble(self, row: ET.Element, column_map: ColumnIndexMap) -> XlsxRow:
        values: XlsxRow = {name: None for name in column_map.names}
        for column, cell in _iter_cells(row):
            name = column_map.get(column)
            if name is None:
                continue
            values[name] = resolve_cell_value(decode_cell(cell, column), self._table)
        return values

    def rows(self) -> Generator[XlsxRow, None, None]:
        """Yield one uniform row per data ``<row>`` element.

        Single-pass: a second call raises RuntimeError.

        Raises:
            DecodingError: If the worksheet XML or a cell is malformed.
            SharedStringIndexError: If a cell references a missing shared string.
        """
        if self._rows_started:
            raise RuntimeError("RowDecoder.rows() can only be consumed once")
        self._rows_started = True
        try:
            column_map = self.read_header()
            if self._state == "done":
                return
            for row in self._elements:
                yield self._assemble(row, column_map)
                self._rows_emitted += 1
                if self._should_stop is not None and self._should_stop():
                    _logger.info(
                        "row decoding cancelled",
                        extra={"entry": self._source, "rows": self._rows_emitted},
                    )
                    return
        finally:
            self._state = "done"
            self._elements.close()


__all__ = [
    "RowDecoder",
]
