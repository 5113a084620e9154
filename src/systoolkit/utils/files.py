"""Utility helpers for working with files."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath

from systoolkit.errors import PathEscapesRoot

LOGGER = logging.getLogger(__name__)

_SIZE_UNITS = ("K", "M", "G", "T", "P", "E")


def format_size(num_bytes: int) -> str:
    """Render a byte count the way ``du -h`` does (``512B``, ``4.0K``, ``1.2M``)."""
    if num_bytes < 1024:
        return f"{num_bytes}B"
    value = float(num_bytes)
    unit = _SIZE_UNITS[0]
    for unit in _SIZE_UNITS:
        value /= 1024
        # compare the printed value so 1023.96K rolls over to 1.0M
        if round(value, 1) < 1024:
            break
    return f"{value:.1f}{unit}"


def relative_to_base(path: Path, base_dir: Path) -> PurePosixPath:
    """Return ``path`` relative to ``base_dir`` as a POSIX archive member name.

    Raises :class:`PathEscapesRoot` when ``path`` is not strictly below
    ``base_dir``. Symlinks are not resolved; both paths are only made absolute
    and normalized.
    """
    absolute = os.path.abspath(path)
    base = os.path.abspath(base_dir)
    try:
        relative = Path(os.path.relpath(absolute, base))
    except ValueError as exc:  # different drives on Windows
        raise PathEscapesRoot(path, base_dir) from exc

    parts = relative.parts
    if relative.is_absolute() or not parts or parts[0] == os.pardir:
        raise PathEscapesRoot(path, base_dir)
    return PurePosixPath(*parts)


@dataclass(slots=True, frozen=True)
class ListingEntry:
    """One row of an ``ls -la`` style listing."""

    name: str
    mode: str
    size: int
    modified: datetime


def list_directory(root: Path, *, limit: int = 20) -> list[ListingEntry]:
    """List ``root`` like ``ls -la``: ``.`` and ``..`` first, then names sorted.

    A directory that cannot be read yields an empty listing and a warning.
    """
    try:
        children = sorted(os.listdir(root))
    except OSError as exc:
        LOGGER.warning("Cannot list %s: %s", root, exc)
        return []
    names = [".", ".."] + children
    entries: list[ListingEntry] = []
    for name in names:
        if len(entries) >= limit:
            break
        try:
            info = os.lstat(root / name)
        except OSError as exc:
            LOGGER.warning("Cannot stat %s: %s", root / name, exc)
            continue
        entries.append(
            ListingEntry(
                name=name,
                mode=stat.filemode(info.st_mode),
                size=info.st_size,
                modified=datetime.fromtimestamp(info.st_mtime),
            )
        )
    return entries
