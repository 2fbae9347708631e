"""Tests for _container module."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest
from conftest import ContainerFactory

from xlsx_stream._container import (
    SHARED_STRINGS_ENTRY,
    WORKSHEET_ENTRY_PREFIX,
    exact_name,
    find_entry,
    iter_chunks,
    iter_entry_names,
    name_prefix,
    open_container,
)
from xlsx_stream._exceptions import ContainerReadError
from xlsx_stream.testing import FileHandleTracker, hooks


def test_exact_name_matcher() -> None:
    matcher = exact_name(SHARED_STRINGS_ENTRY)
    assert matcher("xl/sharedStrings.xml") is True
    assert matcher("xl/sharedStrings.xml.bak") is False
    assert matcher("xl/SharedStrings.xml") is False


def test_name_prefix_matcher() -> None:
    matcher = name_prefix(WORKSHEET_ENTRY_PREFIX)
    assert matcher("xl/worksheets/sheet1.xml") is True
    assert matcher("xl/worksheets/sheet12.xml") is True
    assert matcher("xl/worksheets/_rels/sheet1.xml.rels") is False


def test_iter_entry_names_storage_order(make_container: ContainerFactory) -> None:
    path = make_container([("b.xml", "<b/>"), ("a.xml", "<a/>"), ("c.xml", "<c/>")])
    with open_container(path, 2048) as archive:
        assert iter_entry_names(archive) == ["b.xml", "a.xml", "c.xml"]


def test_find_entry_returns_first_match_in_storage_order(
    make_container: ContainerFactory,
) -> None:
    path = make_container(
        [
            ("xl/worksheets/sheet2.xml", "<second/>"),
            ("xl/worksheets/sheet1.xml", "<first/>"),
        ]
    )
    with (
        open_container(path, 2048) as archive,
        find_entry(archive, name_prefix(WORKSHEET_ENTRY_PREFIX), path) as entry,
    ):
        assert entry is not None
        assert entry.name == "xl/worksheets/sheet2.xml"
        assert entry.size == len("<second/>")
        assert entry.stream.read() == b"<second/>"


def test_find_entry_skips_directories(tmp_path: Path) -> None:
    path = tmp_path / "dirs.xlsx"
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("xl/worksheets/sheetdir/", "")
        archive.writestr("xl/worksheets/sheet1.xml", "<ws/>")
    with (
        open_container(path, 2048) as opened,
        find_entry(opened, name_prefix(WORKSHEET_ENTRY_PREFIX), path) as entry,
    ):
        assert entry is not None
        assert entry.name == "xl/worksheets/sheet1.xml"


def test_find_entry_not_found_yields_none(make_container: ContainerFactory) -> None:
    path = make_container([("xl/workbook.xml", "<workbook/>")])
    with (
        open_container(path, 2048) as archive,
        find_entry(archive, exact_name(SHARED_STRINGS_ENTRY), path) as entry,
    ):
        assert entry is None


def test_closing_entry_keeps_archive_open(make_container: ContainerFactory) -> None:
    path = make_container([("one.xml", "<one/>"), ("two.xml", "<two/>")])
    with open_container(path, 2048) as archive:
        with find_entry(archive, exact_name("one.xml"), path) as first:
            assert first is not None
            stream = first.stream
            assert stream.read() == b"<one/>"
        assert stream.closed
        with find_entry(archive, exact_name("two.xml"), path) as second:
            assert second is not None
            assert second.stream.read() == b"<two/>"


def test_open_container_closes_handle(make_container: ContainerFactory) -> None:
    tracker = FileHandleTracker()
    hooks.open_file = tracker.open
    path = make_container([("a.xml", "<a/>")])
    with open_container(path, 512):
        assert tracker.open_count == 1
        assert not tracker.all_closed()
    assert tracker.all_closed()
    assert tracker.chunk_sizes == [512]


def test_open_container_closes_handle_on_error(make_container: ContainerFactory) -> None:
    tracker = FileHandleTracker()
    hooks.open_file = tracker.open
    path = make_container([("a.xml", "<a/>")])
    with pytest.raises(ValueError), open_container(path, 512):
        raise ValueError("boom")
    assert tracker.all_closed()


def test_open_container_not_a_zip(tmp_path: Path) -> None:
    path = tmp_path / "fake.xlsx"
    path.write_bytes(b"this is not a zip archive")
    tracker = FileHandleTracker()
    hooks.open_file = tracker.open
    with pytest.raises(ContainerReadError) as exc_info, open_container(path, 2048):
        pass
    assert exc_info.value.path == str(path)
    assert "Not a zip container" in exc_info.value.message
    assert tracker.all_closed()


def test_open_container_truncated(make_container: ContainerFactory, tmp_path: Path) -> None:
    source = make_container([("xl/worksheets/sheet1.xml", "<worksheet/>" * 100)])
    data = source.read_bytes()
    truncated = tmp_path / "truncated.xlsx"
    truncated.write_bytes(data[: len(data) // 2])
    with pytest.raises(ContainerReadError), open_container(truncated, 2048):
        pass


def test_open_container_missing_file_propagates_os_error(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError), open_container(tmp_path / "absent.xlsx", 2048):
        pass


def test_iter_chunks_respects_chunk_size() -> None:
    chunks = list(iter_chunks(io.BytesIO(b"abcdefghij"), 4))
    assert chunks == [b"abcd", b"efgh", b"ij"]


def test_iter_chunks_empty_stream() -> None:
    assert list(iter_chunks(io.BytesIO(b""), 4)) == []


def _write_corrupt_container(path: Path) -> Path:
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_STORED) as archive:
        archive.writestr("xl/sharedStrings.xml", "<sst>" + "A" * 64 + "</sst>")
    data = path.read_bytes()
    # same length, different bytes: the stored CRC no longer matches
    path.write_bytes(data.replace(b"A" * 64, b"B" * 64, 1))
    return path


def test_corrupt_entry_reported_against_workbook_path(tmp_path: Path) -> None:
    path = _write_corrupt_container(tmp_path / "corrupt.xlsx")
    with (
        pytest.raises(ContainerReadError) as exc_info,
        open_container(path, 16) as archive,
        find_entry(archive, exact_name(SHARED_STRINGS_ENTRY), path) as entry,
    ):
        assert entry is not None
        list(iter_chunks(entry.stream, 16))
    assert exc_info.value.path == str(path)
    assert "xl/sharedStrings.xml" in exc_info.value.message
