"""Character-level scanning helpers for LDL source text.

These helpers replace the brace and quote bookkeeping that a grammar would
normally provide. They never raise on malformed input: an unterminated block
extends to the end of the text and an unterminated string swallows the rest
of its line.
"""

from __future__ import annotations

from bisect import bisect_right

from models.symbols import Position

_QUOTES = frozenset({'"', "'"})


class LineIndex:
    """Offset <-> (line, col) conversion backed by a line-start table."""

    def __init__(self, text: str) -> None:
        self.text = text
        self._starts = [0]
        for i, char in enumerate(text):
            if char == "\n":
                self._starts.append(i + 1)

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def position(self, offset: int) -> Position:
        offset = max(0, min(offset, len(self.text)))
        line_idx = bisect_right(self._starts, offset) - 1
        return Position(
            offset=offset,
            line=line_idx + 1,
            col=offset - self._starts[line_idx] + 1,
        )

    def offset(self, line: int, col: int) -> int:
        """Convert a 1-based line/col to an offset, clamping out-of-range input."""
        line_idx = max(0, min(line - 1, len(self._starts) - 1))
        start = self._starts[line_idx]
        end = self._line_end(line_idx)
        return max(start, min(start + col - 1, end))

    def line_text(self, line: int) -> str:
        line_idx = max(0, min(line - 1, len(self._starts) - 1))
        return self.text[self._starts[line_idx] : self._line_end(line_idx)]

    def _line_end(self, line_idx: int) -> int:
        if line_idx + 1 < len(self._starts):
            end = self._starts[line_idx + 1] - 1
        else:
            end = len(self.text)
        if end > self._starts[line_idx] and self.text[end - 1] == "\r":
            end -= 1
        return end


def find_block_end(text: str, start: int) -> int:
    """Return the offset just past the brace that closes the block opened after ``start``.

    Braces inside single- or double-quoted strings are ignored; a backslash
    escapes the next character inside a string. When the block never closes
    the end of the text is returned.
    """
    depth = 0
    quote: str | None = None
    i = start
    length = len(text)
    while i < length:
        char = text[i]
        if quote is not None:
            if char == "\\":
                i += 2
                continue
            if char == quote:
                quote = None
        elif char in _QUOTES:
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return length


def is_inside_type_body(text: str, offset: int) -> bool:
    """Heuristic: still inside a class body if ``class `` follows the last ``}``."""
    last_class = text.rfind("class ", 0, offset)
    if last_class == -1:
        return False
    return last_class > text.rfind("}", 0, offset)


def in_string_at(line: str, pos: int) -> bool:
    """Return True when ``pos`` lies inside a quoted string on ``line``.

    Single and double quotes toggle independently; a quote of one kind is
    literal text while a string of the other kind is open.
    """
    in_single = False
    in_double = False
    for char in line[: max(0, pos)]:
        if char == '"' and not in_single:
            in_double = not in_double
        elif char == "'" and not in_double:
            in_single = not in_single
    return in_single or in_double


def line_comment_start(line: str) -> int:
    """Offset of the first ``//`` outside a string literal, or -1."""
    in_single = False
    in_double = False
    for i, char in enumerate(line):
        if char == '"' and not in_single:
            in_double = not in_double
        elif char == "'" and not in_double:
            in_single = not in_single
        elif (
            char == "/"
            and not (in_single or in_double)
            and line.startswith("//", i)
        ):
            return i
    return -1


def in_comment_or_string(line: str, pos: int) -> bool:
    """Return True when ``pos`` is inside a ``//``/``///`` comment or a string."""
    comment = line_comment_start(line)
    if comment != -1 and pos >= comment:
        return True
    return in_string_at(line, pos)


__all__ = [
    "LineIndex",
    "find_block_end",
    "in_comment_or_string",
    "in_string_at",
    "is_inside_type_body",
    "line_comment_start",
]
