"""Typed JSON helpers used by the JSON log formatter and tests."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from json import JSONDecodeError
from typing import Protocol

JSONValue = dict[str, "JSONValue"] | list["JSONValue"] | str | int | float | bool | None

# Accepts TypedDicts and dict literals with mixed values; only serialized, never mutated
_JSONInputValue = str | int | float | bool | None | Mapping[str, object] | Sequence[object]


class InvalidJsonError(ValueError):
    """Raised when JSON parsing fails."""


class _JsonLoads(Protocol):
    def __call__(self, s: str) -> JSONValue: ...


class _JsonDumps(Protocol):
    def __call__(
        self,
        obj: _JSONInputValue,
        *,
        separators: tuple[str, str] | None = ...,
        ensure_ascii: bool = ...,
    ) -> str: ...


def dump_json_str(value: _JSONInputValue, *, compact: bool = True) -> str:
    """Serialize a JSON-compatible value to a JSON string.

    Args:
        value: JSON-serializable value.
        compact: Produce compact JSON without extra whitespace.
    """
    module = __import__("json")
    dumps: _JsonDumps = module.dumps
    separators = (",", ":") if compact else None
    return dumps(value, separators=separators, ensure_ascii=False)


def load_json_str(raw: str) -> JSONValue:
    module = __import__("json")
    loads: _JsonLoads = module.loads
    try:
        value = loads(raw)
    except JSONDecodeError as exc:
        raise InvalidJsonError("Invalid JSON payload") from exc
    if isinstance(value, (dict, list, str, int, float, bool)) or value is None:
        return value
    raise InvalidJsonError("Invalid JSON payload")


__all__ = [
    "InvalidJsonError",
    "JSONValue",
    "dump_json_str",
    "load_json_str",
]
