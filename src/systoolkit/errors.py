"""Exception hierarchy for SysToolkit.

Per-file problems during batch operations are logged and skipped; these
exceptions are reserved for failures that abort the invoked command.
"""

from __future__ import annotations

from pathlib import Path


class ToolkitError(Exception):
    """Base class for errors reported to the user by the CLI."""


class UsageError(ToolkitError):
    """Bad or missing arguments."""


class InvalidArgument(UsageError):
    """An argument was supplied but its value is not acceptable."""


class NotFound(ToolkitError):
    """A directory or file required by the command does not exist."""

    def __init__(self, path: Path, message: str | None = None) -> None:
        self.path = Path(path)
        super().__init__(message or f"Not found: {self.path}")


class NotADirectory(NotFound):
    """The selection root is missing or is not a directory."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, f"Not a directory: {path}")


class ArchiveError(ToolkitError):
    """The archive could not be written; no partial archive is left behind."""


class PathEscapesRoot(ArchiveError):
    """A member path resolves outside of the archive base directory."""

    def __init__(self, path: Path, base_dir: Path) -> None:
        self.path = Path(path)
        self.base_dir = Path(base_dir)
        super().__init__(f"Path {self.path} is outside of {self.base_dir}")
