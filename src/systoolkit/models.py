"""Core SysToolkit data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence


@dataclass(slots=True, frozen=True)
class SelectionCriteria:
    """What to select from a directory tree."""

    root: Path
    extension: str | None = None
    pattern: str | None = None
    fixed_strings: bool = False


@dataclass(slots=True, frozen=True)
class FileEntry:
    """A regular file found during a traversal."""

    path: Path
    size: int

    @property
    def sort_key(self) -> str:
        return str(self.path)


@dataclass(slots=True, frozen=True)
class MatchResult:
    """One line of a file that matched a content pattern."""

    path: Path
    line_number: int
    line_text: str


@dataclass(slots=True, frozen=True)
class ArchiveJob:
    entries: Sequence[FileEntry]
    destination: Path
    base_dir: Path


@dataclass(slots=True, frozen=True)
class CleanupRules:
    """Suffixes identifying junk files; a file matches if any suffix does."""

    suffixes: tuple[str, ...]

    def matches(self, name: str) -> bool:
        return any(name.endswith(suffix) for suffix in self.suffixes)

    def extend(self, *suffixes: str) -> CleanupRules:
        return CleanupRules(self.suffixes + tuple(s for s in suffixes if s not in self.suffixes))


DEFAULT_CLEANUP_RULES = CleanupRules((".tmp", ".log", "~", ".bak"))


@dataclass(slots=True, frozen=True)
class TokenCount:
    token: str
    count: int


@dataclass(slots=True)
class ContentScan:
    """Outcome of a content filter pass."""

    matches: list[MatchResult] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)


@dataclass(slots=True)
class ArchiveResult:
    destination: Path
    members: list[str] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)


@dataclass(slots=True)
class CleanupReport:
    """Files matched by the cleanup rules and what happened to them."""

    matched: list[FileEntry] = field(default_factory=list)
    deleted: list[FileEntry] = field(default_factory=list)
    failed: list[FileEntry] = field(default_factory=list)
    dry_run: bool = False

    @property
    def freed_bytes(self) -> int:
        return sum(entry.size for entry in self.deleted)


@dataclass(slots=True)
class TextStats:
    lines: int = 0
    words: int = 0
    bytes: int = 0


@dataclass(slots=True)
class TextReport:
    path: Path
    stats: TextStats
    top: list[TokenCount]
