"""Text helpers for token-oriented processing."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

# A token is a maximal run of letters or digits; "_" separates tokens.
_TOKEN_RE = re.compile(r"[^\W_]+")


def tokenize(text: str) -> list[str]:
    """Case-fold ``text`` and split it into alphanumeric tokens."""
    return _TOKEN_RE.findall(text.casefold())


def iter_tokens(lines: Iterable[str]) -> Iterator[str]:
    """Yield tokens from a stream of text parts."""
    for line in lines:
        yield from tokenize(line)


def strip_line_ending(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line
