"""Polars DataFrame protocol for strict type checking.

Provides Protocol-based typing for polars DataFrames without importing
polars at module load, keeping the rest of the package free of Any.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol

from xlsx_stream.types.xlsx import CellValue


class PolarsDataFrameProtocol(Protocol):
    """Protocol for polars DataFrame with typed properties."""

    @property
    def columns(self) -> list[str]:
        """Return column names."""
        ...

    @property
    def height(self) -> int:
        """Return number of rows."""
        ...

    def to_dicts(self) -> list[dict[str, CellValue]]:
        """Return rows as dictionaries."""
        ...


class PolarsDataTypeProtocol(Protocol):
    """Opaque polars data type class (e.g. ``pl.String``)."""


class _PolarsDataFrameCtor(Protocol):
    """Protocol for the polars.DataFrame constructor."""

    def __call__(
        self,
        data: Sequence[Mapping[str, CellValue]],
        schema: Mapping[str, PolarsDataTypeProtocol],
    ) -> PolarsDataFrameProtocol: ...


def _string_dtype() -> PolarsDataTypeProtocol:
    """Return the polars string data type."""
    polars_mod = __import__("polars")
    dtype: PolarsDataTypeProtocol = polars_mod.String
    return dtype


def _create_string_frame(
    rows: Sequence[Mapping[str, CellValue]],
    columns: Sequence[str],
) -> PolarsDataFrameProtocol:
    """Build a DataFrame with one String column per header.

    Args:
        rows: Uniform row mappings.
        columns: Column names in output order.

    Returns:
        DataFrame whose schema is ``columns`` even when ``rows`` is empty.
    """
    polars_mod = __import__("polars")
    ctor: _PolarsDataFrameCtor = polars_mod.DataFrame
    dtype = _string_dtype()
    schema: dict[str, PolarsDataTypeProtocol] = {name: dtype for name in columns}
    return ctor(rows, schema=schema)


__all__ = [
    "PolarsDataFrameProtocol",
    "PolarsDataTypeProtocol",
    "_create_string_frame",
]
