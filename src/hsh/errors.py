"""Application-level exception types for hsh."""

from __future__ import annotations

from pathlib import Path


class HshError(Exception):
    """Base exception for hsh."""


class ConfigurationError(HshError):
    """Raised when process settings fail validation."""


class DispatchError(HshError):
    """Base exception for failures surfaced by the dispatch pipeline."""


class SourceError(DispatchError):
    """Raised when a file named by `source` or `.` cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"source: {path}: {reason}")
        self.path = path


class ExecutionError(DispatchError):
    """Raised when the delegated interpreter cannot be spawned."""

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"failed to run {command!r}: {reason}")
        self.command = command


class ExitRequested(HshError):
    """Raised by the `exit` builtin to end the session."""

    def __init__(self, status: int = 0) -> None:
        super().__init__(f"exit {status}")
        self.status = status
