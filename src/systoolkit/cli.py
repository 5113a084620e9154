"""Command line interface for SysToolkit."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from systoolkit.actions.archive import backup_directory
from systoolkit.actions.cleanup import clean
from systoolkit.actions.report import render_directory_summary, render_matches, summarize_directory
from systoolkit.analysis.frequency import analyze_file
from systoolkit.config import (
    VERSION,
    BackupOptions,
    CleanupOptions,
    InspectOptions,
    ProcessOptions,
    ToolkitConfig,
)
from systoolkit.errors import ToolkitError, UsageError
from systoolkit.monitor import render_snapshot, take_snapshot
from systoolkit.scan.content import filter_content
from systoolkit.scan.pathset import scan_tree, select
from systoolkit.utils.files import format_size


console = Console()
err_console = Console(stderr=True)
app = typer.Typer(
    help="SysToolkit - inspect, back up and clean directory trees",
    add_completion=False,
    pretty_exceptions_show_locals=False,
)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _fail(error: Exception | str) -> NoReturn:
    err_console.print(f"Error: {error}", markup=False, highlight=False, soft_wrap=True)
    raise typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        console.print(VERSION)
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    show_version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


@app.command()
def inspect(
    directory: Path = typer.Argument(..., help="Directory to inspect."),
    pattern: Optional[str] = typer.Option(
        None, "--pattern", help="Regular expression searched in file contents."
    ),
    ext: Optional[str] = typer.Option(None, "--ext", help="Only files whose name ends with EXT, e.g. .txt"),
    fixed_strings: bool = typer.Option(
        False, "--fixed-strings", "-F", help="Treat --pattern as a literal substring."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Summarize a directory, or search its files for a pattern."""
    _setup_logging(verbose)
    config = ToolkitConfig()
    options = InspectOptions(
        root=directory,
        extension=ext,
        pattern=pattern,
        fixed_strings=fixed_strings,
        preview_entries=config.preview_entries,
        top_files=config.top_files,
    )

    try:
        criteria = options.criteria
        all_entries = scan_tree(criteria.root)
        selected = select(all_entries, criteria)
        scan = (
            filter_content(selected, criteria.pattern, fixed_strings=criteria.fixed_strings)
            if criteria.pattern
            else None
        )
        summary = summarize_directory(
            options.root,
            all_entries,
            selected,
            include_largest=scan is None,
            preview_entries=options.preview_entries,
            top_files=options.top_files,
        )
    except ToolkitError as exc:
        _fail(exc)

    render_directory_summary(summary, console)
    if scan is None:
        return

    console.print("Matches:")
    render_matches(scan.matches, console)
    if scan.skipped:
        console.print(f"[yellow]Skipped {len(scan.skipped)} unreadable file(s).[/yellow]")


@app.command()
def backup(
    directory: Path = typer.Argument(..., help="Directory to archive."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Archive to create (.tar.gz)."),
    ext: Optional[str] = typer.Option(None, "--ext", help="Only files whose name ends with EXT."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Archive a directory into a compressed tarball."""
    _setup_logging(verbose)
    if output is None:
        _fail(UsageError("backup requires an output file via --output"))
    options = BackupOptions(root=directory, output=output, extension=ext)

    console.print(f"Creating archive: {options.output}", markup=False, highlight=False, soft_wrap=True)
    try:
        result = backup_directory(options.root, options.resolve_output(), options.extension)
    except ToolkitError as exc:
        _fail(exc)

    console.print(
        f"Archive created: {result.destination} ({len(result.members)} files)",
        markup=False,
        highlight=False,
        soft_wrap=True,
    )
    if result.skipped:
        console.print(f"[yellow]Skipped {len(result.skipped)} vanished file(s).[/yellow]")


@app.command()
def cleanup(
    directory: Path = typer.Argument(..., help="Directory to clean."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Only list the files that would be deleted."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Delete temporary, log and backup files."""
    _setup_logging(verbose)
    options = CleanupOptions(root=directory, dry_run=dry_run)

    try:
        report = clean(options.root, options.rules, dry_run=options.dry_run)
    except ToolkitError as exc:
        _fail(exc)

    if report.dry_run:
        console.print("Dry run, files that would be deleted:")
        listed = report.matched
    else:
        console.print("Deleted files:")
        listed = report.deleted
    for entry in listed:
        console.print(str(entry.path), markup=False, highlight=False, soft_wrap=True)

    if report.dry_run:
        console.print(f"{len(report.matched)} file(s) would be deleted.")
        return
    console.print(f"Deleted {len(report.deleted)} file(s), freed {format_size(report.freed_bytes)}.")
    if report.failed:
        console.print(f"[yellow]Could not delete {len(report.failed)} file(s).[/yellow]")


@app.command()
def process(
    file: Path = typer.Argument(..., help="Text file to analyze."),
    top: int = typer.Option(ToolkitConfig().top_tokens, "--top", help="Number of tokens to display"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print line/word/byte counts and the most frequent tokens of a file."""
    _setup_logging(verbose)
    options = ProcessOptions(file=file, top=top)

    try:
        report = analyze_file(options.file, options.top)
    except ToolkitError as exc:
        _fail(exc)

    console.print(f"Statistics for {report.path}", markup=False, highlight=False, soft_wrap=True)
    console.print(f"Lines: {report.stats.lines}")
    console.print(f"Words: {report.stats.words}")
    console.print(f"Bytes: {report.stats.bytes}")

    if not report.top:
        console.print("[yellow]No tokens found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Count", justify="right")
    table.add_column("Token")
    for item in report.top:
        table.add_row(str(item.count), Text(item.token))
    console.print(table)


@app.command()
def monitor() -> None:
    """Show a snapshot of the host: disks, largest directories, processes."""
    _setup_logging(False)
    try:
        snapshot = take_snapshot(Path("."), rows=ToolkitConfig().monitor_rows)
    except ToolkitError as exc:
        _fail(exc)
    render_snapshot(snapshot, console)


@app.command("help")
def help_(ctx: typer.Context) -> None:
    """Show this message."""
    typer.echo(ctx.parent.get_help() if ctx.parent is not None else ctx.get_help())


@app.command()
def version() -> None:
    """Print the version."""
    console.print(VERSION)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit code; usage errors exit with 1."""
    try:
        app(args=argv, prog_name="systoolkit")
    except SystemExit as exc:
        code = exc.code
    else:
        code = 0
    if code is None:
        return 0
    if not isinstance(code, int):
        err_console.print(f"Error: {code}", markup=False, highlight=False, soft_wrap=True)
        return 1
    # click reports usage errors with exit status 2
    return 1 if code == 2 else code
