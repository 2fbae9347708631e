"""Test hooks for xlsx_stream library.

This module provides hooks for testing without mocking or monkeypatching.
Production code calls hooks directly; tests set hooks to fakes.

Usage:
    from xlsx_stream.testing import hooks, reset_hooks

    # In tests:
    def test_something() -> None:
        hooks.open_file = tracker.open
        # ... test code ...

    # Use reset_hooks() in conftest.py fixtures to restore defaults.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

# ---------------------------------------------------------------------------
# Type aliases for hooks
# ---------------------------------------------------------------------------

# Container hooks: open a buffered binary handle with the given buffer size
OpenFileFn = Callable[[Path, int], BinaryIO]

# Config hooks
GetEnvFn = Callable[[str], str | None]


# ---------------------------------------------------------------------------
# Hooks container
# ---------------------------------------------------------------------------


class _HooksContainer:
    """Container for all hookable functions.

    Hooks are set to production implementations at module load time.
    Tests override hooks to use fakes.
    """

    open_file: OpenFileFn
    get_env: GetEnvFn


hooks = _HooksContainer()


# ---------------------------------------------------------------------------
# Production implementations
# ---------------------------------------------------------------------------


def _prod_open_file(path: Path, chunk_size: int) -> BinaryIO:
    """Production implementation: open file for buffered binary reading."""
    # buffering=1 means line buffering, which binary mode does not support
    buffering = chunk_size if chunk_size > 1 else 0
    return path.open("rb", buffering=buffering)


def _prod_get_env(key: str) -> str | None:
    """Production implementation: read from os.environ."""
    return os.getenv(key)


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------


def _init_production_hooks() -> None:
    """Initialize hooks to production implementations.

    Called at module load time and by reset_hooks().
    """
    hooks.open_file = _prod_open_file
    hooks.get_env = _prod_get_env


def reset_hooks() -> None:
    """Reset all hooks to production implementations.

    Use in conftest.py autouse fixture for test isolation.
    """
    _init_production_hooks()


_init_production_hooks()


# ---------------------------------------------------------------------------
# Fake implementations for tests
# ---------------------------------------------------------------------------


class FileHandleTracker:
    """Records every handle opened through hooks.open_file.

    Delegates to the production opener so the container is really read, and
    keeps the handles so tests can assert they were all released.
    """

    def __init__(self) -> None:
        self.handles: list[BinaryIO] = []
        self.chunk_sizes: list[int] = []

    def open(self, path: Path, chunk_size: int) -> BinaryIO:
        """Open a real handle and remember it."""
        handle = _prod_open_file(path, chunk_size)
        self.handles.append(handle)
        self.chunk_sizes.append(chunk_size)
        return handle

    @property
    def open_count(self) -> int:
        """Number of handles opened so far."""
        return len(self.handles)

    def all_closed(self) -> bool:
        """True when every tracked handle has been closed."""
        return all(handle.closed for handle in self.handles)


class FakeEnv:
    """Dictionary-backed replacement for hooks.get_env."""

    def __init__(self, values: dict[str, str]) -> None:
        self._values = values

    def get(self, key: str) -> str | None:
        """Return the configured value, or None when unset."""
        return self._values.get(key)


__all__ = [
    "FakeEnv",
    "FileHandleTracker",
    "GetEnvFn",
    "OpenFileFn",
    "hooks",
    "reset_hooks",
]
