"""Shared-string dictionary decoding.

The dictionary part lists every distinct text value once; cells reference
entries by 0-based position. Position integrity matters more than content,
so items without text still occupy a slot.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import IO

from xlsx_stream._decoders.xml import iter_completed_elements, joined_text
from xlsx_stream._exceptions import SharedStringIndexError

_ITEM = frozenset({"si"})


class SharedStringTable:
    """Immutable ordered table of resolved shared strings."""

    __slots__ = ("_values",)

    def __init__(self, values: Sequence[str]) -> None:
        self._values: tuple[str, ...] = tuple(values)

    @classmethod
    def empty(cls) -> SharedStringTable:
        """Table for workbooks without a shared-strings part."""
        return cls(())

    def lookup(self, index: int) -> str:
        """Return the string at ``index``.

        Raises:
            SharedStringIndexError: If index is outside [0, len - 1].
        """
        if index < 0 or index >= len(self._values):
            raise SharedStringIndexError(index, len(self._values))
        return self._values[index]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"SharedStringTable(size={len(self._values)})"


def parse_shared_strings(
    stream: IO[bytes],
    chunk_size: int,
    source: str = "xl/sharedStrings.xml",
) -> SharedStringTable:
    """Decode the shared-strings part into a table.

    Args:
        stream: Content stream of the shared-strings entry.
        chunk_size: Bytes fed to the parser per read.
        source: Entry name for error messages.

    Returns:
        SharedStringTable with one entry per ``<si>`` item in document order.

    Raises:
        DecodingError: If the part is not well-formed XML.
    """
    values: list[str] = []
    for item in iter_completed_elements(stream, chunk_size, source, _ITEM):
        values.append(joined_text(item))
    return SharedStringTable(values)


__all__ = [
    "SharedStringTable",
    "parse_shared_strings",
]
