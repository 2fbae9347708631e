"""Column identity: cell-reference decoding and the header column map.

Column positions come from the letters of a cell reference ("AB12" -> AB),
read as a base-26 number with A=1 and converted to a 0-based index. The
header row and every data row use the same decoding, so the mapping is
positional rather than matched by name per row.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from xlsx_stream._exceptions import DecodingError
from xlsx_stream.types.xlsx import CellValue


def column_index(reference: str) -> int:
    """Convert a cell reference to a 0-based column index.

    Args:
        reference: Spreadsheet coordinate such as "A1", "Z7" or "AB12".

    Returns:
        0-based column index ("A1" -> 0, "Z1" -> 25, "AA1" -> 26).

    Raises:
        DecodingError: If the reference has no leading column letters.
    """
    index = 0
    letters = 0
    for ch in reference.upper():
        if not ("A" <= ch <= "Z"):
            break
        index = index * 26 + (ord(ch) - ord("A") + 1)
        letters += 1
    if letters == 0:
        raise DecodingError("cell_reference", f"No column letters in {reference!r}")
    return index - 1


class ColumnIndexMap:
    """Immutable mapping from 0-based column index to header name.

    Built once from the header row and never extended. Iteration order of
    ``names`` follows the header row's document order.
    """

    __slots__ = ("_by_index", "_names")

    def __init__(self, entries: Iterable[tuple[int, str]]) -> None:
        by_index: dict[int, str] = {}
        names: dict[str, None] = {}
        for index, name in entries:
            by_index[index] = name
            names[name] = None
        self._by_index = by_index
        self._names: tuple[str, ...] = tuple(names)

    def get(self, index: int) -> str | None:
        """Header name for ``index``, or None when the column is unmapped."""
        return self._by_index.get(index)

    @property
    def names(self) -> tuple[str, ...]:
        """Distinct header names in first-seen order."""
        return self._names

    @property
    def indices(self) -> tuple[int, ...]:
        """Mapped column indices in header document order."""
        return tuple(self._by_index)

    def __contains__(self, index: object) -> bool:
        return index in self._by_index

    def __len__(self) -> int:
        return len(self._by_index)

    def __iter__(self) -> Iterator[int]:
        return iter(self._by_index)

    def __repr__(self) -> str:
        return f"ColumnIndexMap({self._by_index!r})"


def build_column_map(
    headers: Iterable[tuple[int, CellValue]],
    allowed: frozenset[str] | None,
) -> ColumnIndexMap:
    """Build the column map from decoded header cells.

    A header is kept when its trimmed text is non-empty and, if an allow-list
    is given, the text is a member of it (exact, case-sensitive). The stored
    name is the untrimmed text.

    Args:
        headers: (column index, header value) pairs in document order.
        allowed: Optional allow-list of header names.

    Returns:
        Frozen ColumnIndexMap.
    """
    entries: list[tuple[int, str]] = []
    for index, value in headers:
        if value is None or value.strip() == "":
            continue
        if allowed is not None and value not in allowed:
            continue
        entries.append((index, value))
    return ColumnIndexMap(entries)


__all__ = [
    "ColumnIndexMap",
    "build_column_map",
    "column_index",
]
