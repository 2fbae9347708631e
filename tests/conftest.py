"""Shared test fixtures and configuration.

Workbooks are built with zipfile from raw SpreadsheetML so each test controls
the exact parts, entry order and cell attributes the reader sees.
"""

from __future__ import annotations

import zipfile
from collections.abc import Generator
from pathlib import Path
from typing import Protocol
from xml.sax.saxutils import escape

import pytest

from xlsx_stream.testing import reset_hooks

SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"

_CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types"/>'
)
_WORKBOOK = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
    f'<workbook xmlns="{SPREADSHEET_NS}"><sheets/></workbook>'
)


def sheet_xml(rows: str) -> str:
    """Wrap ``<row>`` markup in a worksheet document."""
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<worksheet xmlns="{SPREADSHEET_NS}"><sheetData>{rows}</sheetData></worksheet>'
    )


def shared_strings_xml(values: list[str]) -> str:
    """Shared-strings document with one plain ``<si>`` per value."""
    items = "".join(f"<si><t>{escape(value)}</t></si>" for value in values)
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<sst xmlns="{SPREADSHEET_NS}" count="{len(values)}" '
        f'uniqueCount="{len(values)}">{items}</sst>'
    )


def sst_xml(items: str) -> str:
    """Shared-strings document around raw ``<si>`` markup."""
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<sst xmlns="{SPREADSHEET_NS}">{items}</sst>'
    )


def write_container(path: Path, entries: list[tuple[str, str]]) -> Path:
    """Write ``entries`` (name, text) into a zip file in the given order."""
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, text in entries:
            archive.writestr(name, text)
    return path


class ContainerFactory(Protocol):
    """Callable building a zip file from (entry name, text) pairs."""

    def __call__(self, entries: list[tuple[str, str]], name: str = ...) -> Path: ...


class WorkbookFactory(Protocol):
    """Callable building a minimal workbook from row markup."""

    def __call__(
        self,
        rows: str,
        shared: list[str] | None = ...,
        name: str = ...,
    ) -> Path: ...


@pytest.fixture(autouse=True)
def _reset_test_hooks() -> Generator[None, None, None]:
    """Restore production hooks after each test."""
    yield
    reset_hooks()


@pytest.fixture
def make_container(tmp_path: Path) -> ContainerFactory:
    """Factory for zip containers with explicit entries."""

    def _make(entries: list[tuple[str, str]], name: str = "book.xlsx") -> Path:
        return write_container(tmp_path / name, entries)

    return _make


@pytest.fixture
def make_workbook(tmp_path: Path) -> WorkbookFactory:
    """Factory for workbooks holding one worksheet and optional shared strings."""

    def _make(
        rows: str,
        shared: list[str] | None = None,
        name: str = "book.xlsx",
    ) -> Path:
        entries: list[tuple[str, str]] = [
            ("[Content_Types].xml", _CONTENT_TYPES),
            ("xl/workbook.xml", _WORKBOOK),
        ]
        if shared is not None:
            entries.append(("xl/sharedStrings.xml", shared_strings_xml(shared)))
        entries.append(("xl/worksheets/sheet1.xml", sheet_xml(rows)))
        return write_container(tmp_path / name, entries)

    return _make


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests that read workbooks written by a real spreadsheet producer",
    )
