"""Application configuration defaults and per-command options."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from systoolkit.models import DEFAULT_CLEANUP_RULES, CleanupRules, SelectionCriteria

VERSION = "1.0.0"


@dataclass(slots=True)
class ToolkitConfig:
    preview_entries: int = 20
    top_files: int = 5
    top_tokens: int = 10
    monitor_rows: int = 5


@dataclass(slots=True, frozen=True)
class InspectOptions:
    root: Path
    extension: str | None = None
    pattern: str | None = None
    fixed_strings: bool = False
    preview_entries: int = ToolkitConfig().preview_entries
    top_files: int = ToolkitConfig().top_files

    @property
    def criteria(self) -> SelectionCriteria:
        return SelectionCriteria(
            root=self.root,
            extension=self.extension,
            pattern=self.pattern,
            fixed_strings=self.fixed_strings,
        )


@dataclass(slots=True, frozen=True)
class BackupOptions:
    root: Path
    output: Path
    extension: str | None = None

    def resolve_output(self, base_dir: Path | None = None) -> Path:
        """Resolve the archive path against ``base_dir`` (the cwd by default)."""
        if self.output.is_absolute():
            return self.output
        return (base_dir or Path.cwd()) / self.output


@dataclass(slots=True, frozen=True)
class CleanupOptions:
    root: Path
    dry_run: bool = False
    rules: CleanupRules = DEFAULT_CLEANUP_RULES


@dataclass(slots=True, frozen=True)
class ProcessOptions:
    file: Path
    top: int = ToolkitConfig().top_tokens
