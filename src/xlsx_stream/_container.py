"""Sequential entry scanning over an XLSX zip container.

Each pass over a workbook opens its own container handle; entries are walked
in storage order and the first entry accepted by the matcher is exposed as a
readable stream. Closing the entry stream never closes the container.
"""

from __future__ import annotations

import zipfile
import zlib
from collections.abc import Callable, Generator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, NamedTuple

from xlsx_stream._exceptions import ContainerReadError
from xlsx_stream.logging import get_logger
from xlsx_stream.testing import hooks

SHARED_STRINGS_ENTRY = "xl/sharedStrings.xml"
WORKSHEET_ENTRY_PREFIX = "xl/worksheets/sheet"

EntryMatcher = Callable[[str], bool]


class ContainerEntry(NamedTuple):
    """An open entry located by find_entry()."""

    name: str
    size: int
    stream: IO[bytes]


_logger = get_logger(__name__)


def exact_name(name: str) -> EntryMatcher:
    """Build a matcher accepting only the entry called ``name``."""

    def _match(entry_name: str) -> bool:
        return entry_name == name

    return _match


def name_prefix(prefix: str) -> EntryMatcher:
    """Build a matcher accepting entries whose name starts with ``prefix``."""

    def _match(entry_name: str) -> bool:
        return entry_name.startswith(prefix)

    return _match


@contextmanager
def open_container(path: Path, chunk_size: int) -> Generator[zipfile.ZipFile, None, None]:
    """Open a fresh container handle for one pass.

    Args:
        path: Path to the workbook.
        chunk_size: Buffer size for the underlying file handle.

    Yields:
        Open ZipFile. The file handle and archive are closed on exit.

    Raises:
        ContainerReadError: If the file is not a readable zip container.
    """
    handle = hooks.open_file(path, chunk_size)
    try:
        try:
            archive = zipfile.ZipFile(handle, "r")
        except zipfile.BadZipFile as exc:
            raise ContainerReadError(str(path), f"Not a zip container ({exc})") from exc
        with archive:
            yield archive
    finally:
        handle.close()


def iter_entry_names(archive: zipfile.ZipFile) -> list[str]:
    """Return entry names in storage order."""
    return [info.filename for info in _entries_in_storage_order(archive)]


def _entries_in_storage_order(archive: zipfile.ZipFile) -> list[zipfile.ZipInfo]:
    return sorted(archive.infolist(), key=lambda info: info.header_offset)


@contextmanager
def find_entry(
    archive: zipfile.ZipFile,
    matcher: EntryMatcher,
    path: Path,
) -> Generator[ContainerEntry | None, None, None]:
    """Locate the first entry accepted by ``matcher``.

    Args:
        archive: Open container from open_container().
        matcher: Entry name predicate.
        path: Workbook path, reported in errors.

    Yields:
        ContainerEntry with a stream over the content, or None when no
        entry matches. The stream is closed on exit; the archive stays open.

    Raises:
        ContainerReadError: If the matched entry cannot be opened, or its
            compressed data turns out to be truncated or corrupt while the
            caller reads it.
    """
    for info in _entries_in_storage_order(archive):
        if info.is_dir() or not matcher(info.filename):
            continue
        _logger.debug(
            "container entry matched",
            extra={"entry": info.filename, "size": info.file_size},
        )
        try:
            stream = archive.open(info, "r")
        except (zipfile.BadZipFile, NotImplementedError) as exc:
            raise ContainerReadError(
                str(path), f"Cannot open entry {info.filename} ({exc})"
            ) from exc
        with stream:
            try:
                yield ContainerEntry(info.filename, info.file_size, stream)
            except (zipfile.BadZipFile, EOFError, zlib.error) as exc:
                raise ContainerReadError(
                    str(path), f"Corrupt entry data in {info.filename} ({exc})"
                ) from exc
        return
    yield None


def iter_chunks(stream: IO[bytes], chunk_size: int) -> Generator[bytes, None, None]:
    """Read an entry stream in ``chunk_size`` pieces until end of entry.

    Read errors propagate to the enclosing find_entry(), which reports them
    against the workbook path.
    """
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            return
        yield chunk


__all__ = [
    "SHARED_STRINGS_ENTRY",
    "WORKSHEET_ENTRY_PREFIX",
    "ContainerEntry",
    "EntryMatcher",
    "exact_name",
    "find_entry",
    "iter_chunks",
    "iter_entry_names",
    "name_prefix",
    "open_container",
]
