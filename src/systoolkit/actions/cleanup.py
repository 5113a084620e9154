"""Junk-file cleanup with a mutation-free dry run."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from systoolkit.models import DEFAULT_CLEANUP_RULES, CleanupReport, CleanupRules, FileEntry
from systoolkit.scan.pathset import build_pathset

LOGGER = logging.getLogger(__name__)


def find_junk(root: Path, rules: CleanupRules = DEFAULT_CLEANUP_RULES) -> list[FileEntry]:
    """Return the files under ``root`` whose name matches any cleanup rule."""
    return [entry for entry in build_pathset(root) if rules.matches(entry.path.name)]


def _delete_entries(entries: Sequence[FileEntry]) -> CleanupReport:
    report = CleanupReport(matched=list(entries))
    for entry in entries:
        try:
            entry.path.unlink()
        except OSError as exc:
            LOGGER.warning("Could not delete %s: %s", entry.path, exc)
            report.failed.append(entry)
            continue
        LOGGER.debug("Deleted %s", entry.path)
        report.deleted.append(entry)
    return report


def clean(
    root: Path, rules: CleanupRules = DEFAULT_CLEANUP_RULES, dry_run: bool = False
) -> CleanupReport:
    """Delete junk files under ``root``, or only list them when ``dry_run``.

    Deletion is best effort: a file that cannot be removed is reported in
    ``CleanupReport.failed`` and the sweep continues.
    """
    matched = find_junk(root, rules)
    if dry_run:
        return CleanupReport(matched=matched, dry_run=True)
    return _delete_entries(matched)
