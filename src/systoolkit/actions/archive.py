"""Pack a PathSet into a gzip-compressed tar archive.

The archive is written to a temporary file next to the destination and moved
into place only once it is complete, so a failed run never leaves a partial
archive under the requested name.
"""

from __future__ import annotations

import logging
import os
import tarfile
import tempfile
from pathlib import Path
from typing import List, Tuple

from systoolkit.errors import ArchiveError, NotADirectory
from systoolkit.models import ArchiveJob, ArchiveResult, FileEntry
from systoolkit.scan.pathset import build_pathset
from systoolkit.utils.files import relative_to_base

LOGGER = logging.getLogger(__name__)


def _check_destination(destination: Path) -> None:
    parent = destination.parent
    if not parent.is_dir():
        raise ArchiveError(f"Output directory does not exist: {parent}")
    if not os.access(parent, os.W_OK | os.X_OK):
        raise ArchiveError(f"Output directory is not writable: {parent}")
    if destination.is_dir():
        raise ArchiveError(f"Output path is a directory: {destination}")


def _default_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def plan_archive(job: ArchiveJob) -> List[Tuple[FileEntry, str]]:
    """Pair each entry with its member name relative to ``job.base_dir``.

    Raises :class:`PathEscapesRoot` for the first entry outside the base
    directory; nothing has been written at that point.
    """
    return [(entry, relative_to_base(entry.path, job.base_dir).as_posix()) for entry in job.entries]


def _add_member(tar: tarfile.TarFile, entry: FileEntry, arcname: str) -> bool:
    try:
        handle = entry.path.open("rb")
    except FileNotFoundError:
        LOGGER.warning("Skipping %s: file vanished before it could be archived", entry.path)
        return False
    with handle:
        info = tar.gettarinfo(arcname=arcname, fileobj=handle)
        tar.addfile(info, handle)
    return True


def archive(job: ArchiveJob) -> ArchiveResult:
    """Write ``job.entries`` to ``job.destination`` as a ``.tar.gz``."""
    base_dir = Path(job.base_dir)
    if not base_dir.is_dir():
        raise NotADirectory(base_dir)
    destination = Path(os.path.abspath(job.destination))
    _check_destination(destination)

    members = plan_archive(job)
    result = ArchiveResult(destination=destination)

    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{destination.name}.", suffix=".partial", dir=destination.parent
        )
    except OSError as exc:
        raise ArchiveError(f"Cannot create temporary archive in {destination.parent}: {exc}") from exc

    tmp_path = Path(tmp_name)
    committed = False
    try:
        with os.fdopen(fd, "wb") as raw:
            with tarfile.open(fileobj=raw, mode="w:gz") as tar:
                for entry, arcname in members:
                    if _add_member(tar, entry, arcname):
                        result.members.append(arcname)
                    else:
                        result.skipped.append(entry.path)
            raw.flush()
            os.fsync(raw.fileno())
        os.chmod(tmp_path, _default_file_mode())
        os.replace(tmp_path, destination)
        committed = True
    except (OSError, tarfile.TarError) as exc:
        raise ArchiveError(f"Failed to write archive {destination}: {exc}") from exc
    finally:
        if not committed:
            tmp_path.unlink(missing_ok=True)

    LOGGER.info("Archived %d file(s) into %s", len(result.members), destination)
    return result


def backup_directory(root: Path, destination: Path, extension: str | None = None) -> ArchiveResult:
    """Archive the regular files under ``root`` into ``destination``.

    An existing file at ``destination`` inside ``root`` is not archived.
    """
    root = Path(root)
    if not root.is_dir():
        raise NotADirectory(root)
    destination = Path(os.path.abspath(destination))
    _check_destination(destination)

    entries = [
        entry
        for entry in build_pathset(root, extension)
        if Path(os.path.abspath(entry.path)) != destination
    ]
    return archive(ArchiveJob(entries=entries, destination=destination, base_dir=root))
