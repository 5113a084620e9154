"""Human-readable rendering of directory statistics and content matches."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from systoolkit.models import FileEntry, MatchResult
from systoolkit.utils.files import ListingEntry, format_size, list_directory, relative_to_base


@dataclass(slots=True)
class DirectorySummary:
    root: Path
    total_size: int
    listing: list[ListingEntry]
    file_count: int
    largest: list[FileEntry] | None = None


def largest_files(entries: Sequence[FileEntry], limit: int = 5) -> list[FileEntry]:
    """Top ``limit`` files by size descending, ties broken by path ascending."""
    return sorted(entries, key=lambda entry: (-entry.size, entry.sort_key))[:limit]


def summarize_directory(
    root: Path,
    all_entries: Sequence[FileEntry],
    selected: Sequence[FileEntry],
    *,
    include_largest: bool = True,
    preview_entries: int = 20,
    top_files: int = 5,
) -> DirectorySummary:
    """Collect the statistics shown by ``inspect``.

    ``all_entries`` is the whole tree (for the total size) and ``selected``
    the files passing the extension filter.
    """
    return DirectorySummary(
        root=Path(root),
        total_size=sum(entry.size for entry in all_entries),
        listing=list_directory(Path(root), limit=preview_entries),
        file_count=len(selected),
        largest=largest_files(selected, top_files) if include_largest else None,
    )


def render_directory_summary(summary: DirectorySummary, console: Console) -> None:
    console.print(f"Directory: {summary.root}", markup=False, highlight=False, soft_wrap=True)
    console.print(f"Total size: {format_size(summary.total_size)}")

    listing = Table(show_header=True, header_style="bold magenta", title="Contents")
    listing.add_column("Mode")
    listing.add_column("Size", justify="right")
    listing.add_column("Modified")
    listing.add_column("Name", overflow="fold")
    for row in summary.listing:
        listing.add_row(row.mode, str(row.size), row.modified.strftime("%Y-%m-%d %H:%M"), Text(row.name))
    console.print(listing)

    console.print(f"Matching files: {summary.file_count}")
    if summary.largest is None:
        return
    if not summary.largest:
        console.print("[yellow]No files found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta", title="Largest files")
    table.add_column("Size", justify="right")
    table.add_column("File", overflow="fold")
    for entry in summary.largest:
        table.add_row(format_size(entry.size), Text(str(relative_to_base(entry.path, summary.root))))
    console.print(table)


def format_match(match: MatchResult) -> str:
    return f"{match.path}:{match.line_number}:{match.line_text}"


def render_matches(matches: Sequence[MatchResult], console: Console) -> None:
    """Print matches as ``path:lineNumber:lineText``, one per line."""
    if not matches:
        console.print("[yellow]No matches found.[/yellow]")
        return
    for match in matches:
        console.print(format_match(match), markup=False, highlight=False, soft_wrap=True)
