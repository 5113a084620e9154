"""Token frequency counting over text streams."""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Iterable, Iterator

from systoolkit.errors import InvalidArgument, NotFound, ToolkitError
from systoolkit.models import TextReport, TextStats, TokenCount
from systoolkit.utils.text import iter_tokens

LOGGER = logging.getLogger(__name__)


def count_top(stream: Iterable[str] | str, top_n: int) -> list[TokenCount]:
    """Return the ``top_n`` most frequent tokens in ``stream``.

    Tokens are ordered by count descending; equal counts keep the order in
    which the tokens were first seen. ``top_n`` must be positive.
    """
    if top_n <= 0:
        raise InvalidArgument(f"top must be a positive integer, got {top_n}")
    if isinstance(stream, str):
        stream = [stream]
    counts = Counter(iter_tokens(stream))
    return [TokenCount(token=token, count=count) for token, count in counts.most_common(top_n)]


def _iter_decoded_lines(path: Path, stats: TextStats) -> Iterator[str]:
    # wc semantics: lines are newline characters, words are whitespace separated
    with path.open("rb") as handle:
        for raw in handle:
            stats.bytes += len(raw)
            stats.words += len(raw.split())
            if raw.endswith(b"\n"):
                stats.lines += 1
            yield raw.decode("utf-8", errors="replace")


def analyze_file(path: Path, top_n: int) -> TextReport:
    """Count lines, words, bytes and the most frequent tokens of ``path`` in one pass."""
    path = Path(path)
    if not path.is_file():
        raise NotFound(path, f"Not a file: {path}")

    stats = TextStats()
    try:
        top = count_top(_iter_decoded_lines(path, stats), top_n)
    except OSError as exc:
        raise ToolkitError(f"Cannot read {path}: {exc}") from exc
    LOGGER.debug("Counted %d line(s), %d word(s) in %s", stats.lines, stats.words, path)
    return TextReport(path=path, stats=stats, top=top)
