"""Directory traversal producing sorted sets of regular files."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Callable, Iterable, Iterator

from systoolkit.errors import NotADirectory
from systoolkit.models import FileEntry, SelectionCriteria

LOGGER = logging.getLogger(__name__)

FilePredicate = Callable[[FileEntry], bool]


def make_predicate(extension: str | None = None) -> FilePredicate:
    """Build a predicate testing the file name for a literal suffix."""
    if not extension:
        return lambda entry: True

    def has_extension(entry: FileEntry) -> bool:
        return entry.path.name.endswith(extension)

    return has_extension


def _ensure_directory(root: Path) -> Path:
    root = Path(root)
    if not root.is_dir():
        raise NotADirectory(root)
    return root


def _on_walk_error(exc: OSError) -> None:
    LOGGER.warning("Cannot read directory %s: %s", exc.filename, exc.strerror or exc)


def iter_regular_files(root: Path) -> Iterator[FileEntry]:
    """Yield every regular file below ``root`` in filesystem order.

    Symbolic links are skipped and symlinked directories are not followed.
    """
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_walk_error, followlinks=False):
        base = Path(dirpath)
        for name in filenames:
            path = base / name
            try:
                info = os.lstat(path)
            except OSError as exc:
                LOGGER.warning("Cannot stat %s: %s", path, exc)
                continue
            if stat.S_ISREG(info.st_mode):
                yield FileEntry(path=path, size=info.st_size)


def sort_entries(entries: Iterable[FileEntry]) -> list[FileEntry]:
    return sorted(entries, key=lambda entry: entry.sort_key)


def scan_tree(root: Path) -> list[FileEntry]:
    """Return every regular file under ``root``, sorted by path string."""
    root = _ensure_directory(root)
    return sort_entries(iter_regular_files(root))


def select(entries: Iterable[FileEntry], criteria: SelectionCriteria) -> list[FileEntry]:
    """Apply the name-based part of ``criteria`` to an already built PathSet."""
    predicate = make_predicate(criteria.extension)
    return [entry for entry in entries if predicate(entry)]


def build_pathset(root: Path, extension: str | None = None) -> list[FileEntry]:
    """Walk ``root`` and return its regular files, optionally by extension."""
    root = _ensure_directory(root)
    predicate = make_predicate(extension)
    entries = sort_entries(entry for entry in iter_regular_files(root) if predicate(entry))
    LOGGER.debug("Selected %d file(s) under %s", len(entries), root)
    return entries
