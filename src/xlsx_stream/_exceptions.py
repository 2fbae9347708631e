"""Exception hierarchy for xlsx_stream library.

All exceptions propagate without recovery. Callers handle failures explicitly.
"""

from __future__ import annotations


class XlsxStreamError(Exception):
    """Base exception for xlsx_stream library.

    All library exceptions inherit from this base class.
    """


class WorkbookReadError(XlsxStreamError):
    """Raised when a workbook path cannot be read.

    Attributes:
        path: The workbook path.
        message: Description of the failure.
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class ContainerReadError(XlsxStreamError):
    """Raised when the zip container is missing, truncated or corrupt.

    Attributes:
        path: The container path.
        message: Description of the failure.
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class DecodingError(XlsxStreamError):
    """Raised when XML decoding or validation fails.

    This indicates malformed or unexpected data in an otherwise valid container.

    Attributes:
        context: Description of what was being decoded.
        message: Description of the decoding failure.
    """

    def __init__(self, context: str, message: str) -> None:
        self.context = context
        self.message = message
        super().__init__(f"{context}: {message}")


class SharedStringIndexError(DecodingError, IndexError):
    """Raised when a cell references a shared string outside the table.

    Attributes:
        index: The requested index.
        size: Number of entries in the shared-string table.
    """

    def __init__(self, index: int, size: int) -> None:
        self.index = index
        self.size = size
        super().__init__(
            "shared_strings",
            f"Index {index} out of range for table of {size} entries",
        )


__all__ = [
    "ContainerReadError",
    "DecodingError",
    "SharedStringIndexError",
    "WorkbookReadError",
    "XlsxStreamError",
]
