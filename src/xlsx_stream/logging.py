from __future__ import annotations

import logging
import socket
import sys
import time
from typing import Literal, Protocol, TypedDict

from xlsx_stream._json import JSONValue, dump_json_str

LogFormat = Literal["json", "text"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Structured fields the library attaches via ``extra=``
_STRUCTURED_FIELDS: tuple[str, ...] = (
    "path",
    "entry",
    "size",
    "chunk_size",
    "shared_strings",
    "columns",
    "rows",
    "state",
)


class _OsModule(Protocol):
    """Protocol for os module to avoid Any from __import__."""

    def getpid(self) -> int: ...


class _LogRecordMapping(Protocol):
    """Minimal mapping interface for LogRecord.__dict__ without Any leakage."""

    def __contains__(self, key: str) -> bool: ...

    def __getitem__(self, key: str) -> object: ...


class _MissingValue:
    """Sentinel for absent or invalid LogRecord attributes."""

    __slots__ = ()


_MISSING = _MissingValue()


def _get_json_record_value(record: logging.LogRecord, field_name: str) -> JSONValue | _MissingValue:
    """Fetch a record attribute and validate it is JSON-compatible."""
    record_mapping: _LogRecordMapping = record.__dict__
    if field_name not in record_mapping:
        return _MISSING
    raw_value = record_mapping[field_name]
    if isinstance(raw_value, (str, int, float, bool)) or raw_value is None:
        return raw_value
    if isinstance(raw_value, list) and all(isinstance(item, str) for item in raw_value):
        items: list[JSONValue] = [str(item) for item in raw_value]
        return items
    return _MISSING


class JsonFormatter(logging.Formatter):
    """JSON formatter producing one object per record.

    Produces consistent structured logs with:
    - ISO8601 timestamp (UTC)
    - level, logger, message
    - Optional static fields (service, instance_id)
    - Structured extra fields extracted from LogRecord
    - Exception info if present
    """

    def __init__(
        self,
        *,
        static_fields: dict[str, str],
        extra_field_names: list[str],
    ) -> None:
        """Initialize JSON formatter.

        Args:
            static_fields: Fields to include in every log record (e.g., service name)
            extra_field_names: Names of extra fields to extract from LogRecord attributes
        """
        super().__init__()
        self._static = static_fields
        self._extra_fields = extra_field_names

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        payload: dict[str, JSONValue] = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in self._static:
            payload[key] = self._static[key]

        for field_name in (*self._extra_fields, *_STRUCTURED_FIELDS):
            if field_name in payload:
                continue
            field_value = _get_json_record_value(record, field_name)
            if isinstance(field_value, _MissingValue):
                continue
            payload[field_name] = field_value

        if record.exc_info is not None:
            payload["exc_info"] = self.formatException(record.exc_info)

        return dump_json_str(payload, compact=False)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter for development/debugging.

    Format: [timestamp] [LEVEL] [logger] [extra_fields] message
    """

    def __init__(self, *, extra_fields: list[str]) -> None:
        """Initialize text formatter.

        Args:
            extra_fields: Names of extra fields to show in output
        """
        super().__init__()
        self._extra_fields = extra_fields

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as human-readable text."""
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        parts: list[str] = [
            f"[{timestamp}]",
            f"[{record.levelname}]",
            f"[{record.name}]",
        ]

        for field_name in self._extra_fields:
            field_value = _get_json_record_value(record, field_name)
            if isinstance(field_value, _MissingValue):
                continue
            parts.append(f"{field_name}={field_value}")

        parts.append(record.getMessage())

        line = " ".join(parts)

        if record.exc_info is not None:
            line = line + "\n" + self.formatException(record.exc_info)

        return line


def _compute_instance_id() -> str:
    """Generate a stable instance ID from hostname and PID."""
    host = socket.gethostname().split(".")[0]
    os_mod = __import__("os")
    os_protocol: _OsModule = os_mod
    pid_value = os_protocol.getpid()
    return f"{host}-{pid_value}"


def _level_to_int(level: LogLevel) -> int:
    """Convert string log level to integer constant."""
    level_map: dict[LogLevel, int] = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map[level]


def setup_logging(
    *,
    level: LogLevel,
    format_mode: LogFormat,
    service_name: str,
    instance_id: str | None,
    extra_fields: list[str] | None,
) -> logging.Logger:
    """Configure the root logger for an application embedding xlsx_stream.

    The library itself only calls get_logger(); applications call this once
    at startup. Clears existing root handlers to ensure clean state.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_mode: Output format ("json" for production, "text" for dev)
        service_name: Service name to include in all JSON logs
        instance_id: Instance ID (auto-generated if None)
        extra_fields: Extra field names to render in text mode (defaults to the
            library's structured fields when None)

    Returns:
        Configured root logger

    Example:
        >>> from xlsx_stream.logging import setup_logging
        >>> logger = setup_logging(
        ...     level="INFO",
        ...     format_mode="text",
        ...     service_name="xlsx-export",
        ...     instance_id=None,
        ...     extra_fields=None,
        ... )
        >>> logger.info("export started")
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(_level_to_int(level))

    computed_instance_id = instance_id if instance_id is not None else _compute_instance_id()
    static_fields: dict[str, str] = {
        "service": service_name,
        "instance_id": computed_instance_id,
    }
    extra_field_names = extra_fields if extra_fields is not None else list(_STRUCTURED_FIELDS)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    if format_mode == "json":
        handler.setFormatter(
            JsonFormatter(static_fields=static_fields, extra_field_names=extra_field_names)
        )
    else:
        handler.setFormatter(TextFormatter(extra_fields=extra_field_names))

    root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance by name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


class LogEventFields(TypedDict, total=False):
    """Optional structured fields attached to xlsx_stream log events."""

    path: str
    entry: str
    size: int
    chunk_size: int
    shared_strings: int
    columns: list[str]
    rows: int
    state: str


__all__ = [
    "JsonFormatter",
    "LogEventFields",
    "LogFormat",
    "LogLevel",
    "TextFormatter",
    "get_logger",
    "setup_logging",
]
