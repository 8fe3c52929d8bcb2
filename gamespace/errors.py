"""Error types raised by the launcher core.

Line-level decode errors are swallowed by the loaders, launch-time errors are
raised synchronously to the caller, and anything that happens after a child
was spawned only reaches the console sink.
"""
from __future__ import annotations

from typing import Optional


class LauncherError(Exception):
    """Base error; ``message`` is what the UI shows."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message} ({self.cause})"


class DecodeError(LauncherError):
    """A stored line did not hold name, path and args."""


class ValidationError(LauncherError):
    """Name or path missing after trimming."""


class LaunchError(LauncherError):
    """The record could not be launched; no process is running for it."""


class PathNotFound(LaunchError):
    pass


class SpawnFailure(LaunchError):
    pass


class PersistFailure(LauncherError):
    """Reading or writing a records file failed."""
