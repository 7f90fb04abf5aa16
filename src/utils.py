"""Shared text helpers for cursor-relative lookups."""

from __future__ import annotations

import re

_WORD = re.compile(r"\w+")
_TRAILING_IDENTIFIER = re.compile(r"[A-Za-z0-9_]*$")
_WHITESPACE = re.compile(r"\s+")


def word_at(line: str, index: int) -> tuple[str, int, int] | None:
    """Return the word touching ``index`` on ``line`` with its [start, end) span.

    A cursor just past the last character of a word still selects it.

    Examples:
        >>> word_at("let x = SQ3R(t)", 9)
        ('SQ3R', 8, 12)
        >>> word_at("a + b", 2) is None
        True
    """
    index = max(0, min(index, len(line)))
    for match in _WORD.finditer(line):
        if match.start() <= index <= match.end():
            return match.group(0), match.start(), match.end()
        if match.start() > index:
            break
    return None


def trailing_identifier(text: str) -> str:
    """Identifier characters immediately before the end of ``text``."""
    match = _TRAILING_IDENTIFIER.search(text)
    return match.group(0) if match else ""


def last_word(text: str) -> str:
    """Last whitespace-separated word; empty when ``text`` ends in whitespace."""
    return _WHITESPACE.split(text)[-1]
