"""Incremental XML event helpers for SpreadsheetML parts.

Parts are fed to an ElementTree pull parser in fixed-size chunks, so a part
is never held in memory whole. Completed elements of interest are detached
from their parent once the consumer has handled them.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Generator
from typing import IO

from xlsx_stream._container import iter_chunks
from xlsx_stream._exceptions import DecodingError


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix from an element tag."""
    return tag.rpartition("}")[2]


def _iter_events(
    stream: IO[bytes],
    chunk_size: int,
    source: str,
) -> Generator[tuple[str, ET.Element], None, None]:
    parser = ET.XMLPullParser(events=("start", "end"))
    try:
        for chunk in iter_chunks(stream, chunk_size):
            parser.feed(chunk)
            for event, node in parser.read_events():
                if isinstance(node, ET.Element):
                    yield event, node
        parser.close()
        for event, node in parser.read_events():
            if isinstance(node, ET.Element):
                yield event, node
    except ET.ParseError as exc:
        raise DecodingError(source, f"Malformed XML ({exc})") from exc


def iter_completed_elements(
    stream: IO[bytes],
    chunk_size: int,
    source: str,
    names: frozenset[str],
) -> Generator[ET.Element, None, None]:
    """Yield each fully parsed element whose local name is in ``names``.

    The element is removed from its parent after the consumer resumes the
    generator, so memory stays bounded by one element at a time.

    Args:
        stream: Entry content stream.
        chunk_size: Bytes fed to the parser per read.
        source: Entry name for error messages.
        names: Local element names to yield.

    Raises:
        DecodingError: If the part is not well-formed XML.
    """
    stack: list[ET.Element] = []
    for event, node in _iter_events(stream, chunk_size, source):
        if event == "start":
            stack.append(node)
            continue
        stack.pop()
        if local_name(node.tag) not in names:
            continue
        yield node
        if stack:
            stack[-1].remove(node)
        node.clear()


def joined_text(item: ET.Element) -> str:
    """Concatenate the text runs of a string item (``<si>`` or ``<is>``).

    Takes the direct ``<t>`` child and the ``<t>`` of each ``<r>`` run in
    document order. Run properties and phonetic runs are ignored.
    """
    parts: list[str] = []
    for child in item:
        name = local_name(child.tag)
        if name == "t":
            parts.append(child.text or "")
        elif name == "r":
            for run_child in child:
                if local_name(run_child.tag) == "t":
                    parts.append(run_child.text or "")
    return "".join(parts)


__all__ = [
    "iter_completed_elements",
    "joined_text",
    "local_name",
]
