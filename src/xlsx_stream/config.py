from __future__ import annotations

from typing import TypedDict

from xlsx_stream.logging import LogFormat, LogLevel
from xlsx_stream.testing import hooks

DEFAULT_CHUNK_SIZE = 2048


class _EnvError(RuntimeError):
    pass


def _optional_env_str(key: str) -> str | None:
    value = hooks.get_env(key)
    if value is None:
        return None
    trimmed = value.strip()
    if trimmed == "":
        return None
    return trimmed


def _parse_str(key: str, default: str) -> str:
    val = _optional_env_str(key)
    return val if val is not None else default


def _parse_positive_int(key: str, default: int) -> int:
    val = _optional_env_str(key)
    if val is None:
        return default
    parsed = int(val)
    if parsed <= 0:
        raise ValueError(f"Env var {key} must be a positive integer, got {val!r}")
    return parsed


def _parse_csv(key: str) -> frozenset[str] | None:
    raw = _optional_env_str(key)
    if raw is None:
        return None
    parts = [p.strip() for p in raw.split(",") if p.strip() != ""]
    if not parts:
        raise _EnvError(f"Env var {key} must contain at least one entry")
    return frozenset(parts)


def _parse_log_level(key: str, default: LogLevel) -> LogLevel:
    val = _optional_env_str(key)
    if val is None:
        return default
    upper_val = val.upper()
    if upper_val == "DEBUG":
        return "DEBUG"
    if upper_val == "INFO":
        return "INFO"
    if upper_val == "WARNING":
        return "WARNING"
    if upper_val == "ERROR":
        return "ERROR"
    if upper_val == "CRITICAL":
        return "CRITICAL"
    return default


def _parse_log_format(key: str, default: LogFormat) -> LogFormat:
    val = _optional_env_str(key)
    if val is None:
        return default
    lower_val = val.lower()
    if lower_val == "json":
        return "json"
    if lower_val == "text":
        return "text"
    raise ValueError(f"Invalid log format for {key}: {val!r}")


class XlsxStreamLoggingConfig(TypedDict, total=True):
    """Logging configuration."""

    level: LogLevel
    format: LogFormat
    service_name: str


class XlsxStreamReaderConfig(TypedDict, total=True):
    """Reader configuration."""

    chunk_size: int
    columns: frozenset[str] | None


class XlsxStreamSettings(TypedDict, total=True):
    """Configuration for applications embedding xlsx_stream."""

    logging: XlsxStreamLoggingConfig
    reader: XlsxStreamReaderConfig


def load_reader_settings() -> XlsxStreamSettings:
    """Load xlsx_stream settings from environment variables.

    Environment variables:
        XLSX_STREAM__CHUNK_SIZE: Read granularity in bytes (default: 2048)
        XLSX_STREAM__COLUMNS: Comma-separated header allow-list (default: all columns)
        LOGGING__LEVEL: Log level (default: INFO)
        LOGGING__FORMAT: Log format, json or text (default: text)
        LOGGING__SERVICE_NAME: Service name for JSON logs (default: xlsx-stream)

    Raises:
        ValueError: If a numeric or enumerated variable is invalid.
        RuntimeError: If XLSX_STREAM__COLUMNS contains only separators.
    """
    logging_cfg: XlsxStreamLoggingConfig = {
        "level": _parse_log_level("LOGGING__LEVEL", "INFO"),
        "format": _parse_log_format("LOGGING__FORMAT", "text"),
        "service_name": _parse_str("LOGGING__SERVICE_NAME", "xlsx-stream"),
    }
    reader_cfg: XlsxStreamReaderConfig = {
        "chunk_size": _parse_positive_int("XLSX_STREAM__CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
        "columns": _parse_csv("XLSX_STREAM__COLUMNS"),
    }
    return {
        "logging": logging_cfg,
        "reader": reader_cfg,
    }


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "XlsxStreamLoggingConfig",
    "XlsxStreamReaderConfig",
    "XlsxStreamSettings",
    "load_reader_settings",
]
