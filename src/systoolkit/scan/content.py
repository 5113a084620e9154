"""Line-oriented content filtering over a PathSet."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Iterable, List

from systoolkit.errors import InvalidArgument
from systoolkit.models import ContentScan, FileEntry, MatchResult
from systoolkit.utils.text import strip_line_ending

LOGGER = logging.getLogger(__name__)

LineMatcher = Callable[[str], bool]


class BinaryFileError(ValueError):
    """Raised when a file looks binary and is not searched."""


def compile_matcher(pattern: str, *, fixed_strings: bool = False) -> LineMatcher:
    """Return a per-line test for ``pattern``.

    By default ``pattern`` is a Python regular expression searched anywhere in
    the line. With ``fixed_strings`` it is a plain substring.
    """
    if fixed_strings:
        return lambda line: pattern in line
    try:
        regex = re.compile(pattern)
    except re.error as exc:
        raise InvalidArgument(f"Invalid pattern {pattern!r}: {exc}") from exc
    return lambda line: regex.search(line) is not None


def _search_file(path: Path, matcher: LineMatcher) -> List[MatchResult]:
    matches: List[MatchResult] = []
    with path.open("r", encoding="utf-8", errors="strict", newline="\n") as handle:
        for line_number, line in enumerate(handle, start=1):
            if "\x00" in line:
                raise BinaryFileError("binary content")
            text = strip_line_ending(line)
            if matcher(text):
                matches.append(MatchResult(path=path, line_number=line_number, line_text=text))
    return matches


def filter_content(
    entries: Iterable[FileEntry], pattern: str, *, fixed_strings: bool = False
) -> ContentScan:
    """Return every line of ``entries`` matching ``pattern``.

    Files that cannot be opened or decoded are skipped with a warning; the
    scan always runs to completion.
    """
    matcher = compile_matcher(pattern, fixed_strings=fixed_strings)
    scan = ContentScan()
    for entry in entries:
        try:
            scan.matches.extend(_search_file(entry.path, matcher))
        except (OSError, UnicodeDecodeError, BinaryFileError) as exc:
            LOGGER.warning("Skipping %s: %s", entry.path, exc)
            scan.skipped.append(entry.path)
    if not scan.matches:
        LOGGER.debug("No line matched %r", pattern)
    return scan
