"""Advisory checks: bracket balance and duplicate declarations.

Checks never fail; they only report findings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from models.completion import Finding
from models.symbols import FunctionSymbol
from parse.scanner import LineIndex
from parse.symbols import parse_document
from rules.config import ChecksConfig

if TYPE_CHECKING:
    from parse.symbol_table import SymbolTable

_PAIRS = {"(": ")", "{": "}", "[": "]"}
_CLOSERS = frozenset(_PAIRS.values())
_QUOTES = frozenset({'"', "'"})


def check_brackets(text: str) -> list[Finding]:
    """Report unmatched, mismatched and unclosed brackets.

    Brackets inside string literals and ``//`` comments are ignored.
    """
    lines = LineIndex(text)
    findings: list[Finding] = []
    stack: list[tuple[str, int]] = []
    quote: str | None = None
    i = 0
    length = len(text)

    while i < length:
        char = text[i]
        if quote is not None:
            if char == "\\":
                i += 2
                continue
            if char == quote or char == "\n":
                quote = None
        elif char in _QUOTES:
            quote = char
        elif char == "/" and text.startswith("//", i):
            newline = text.find("\n", i)
            i = length if newline == -1 else newline
            continue
        elif char in _PAIRS:
            stack.append((char, i))
        elif char in _CLOSERS:
            if not stack:
                findings.append(
                    Finding(
                        code="unmatched_closing_bracket",
                        message=f"Closing bracket {char} has no opening bracket",
                        severity="error",
                        position=lines.position(i),
                    )
                )
            else:
                opener, _ = stack.pop()
                expected = _PAIRS[opener]
                if char != expected:
                    findings.append(
                        Finding(
                            code="mismatched_bracket",
                            message=f"Mismatched bracket: expected {expected}, got {char}",
                            severity="error",
                            position=lines.position(i),
                        )
                    )
        i += 1

    findings.extend(
        Finding(
            code="unclosed_bracket",
            message=f"Unclosed bracket {opener}",
            severity="error",
            position=lines.position(offset),
        )
        for opener, offset in stack
    )
    return findings


def check_duplicates(
    table: SymbolTable, *, flag_unversioned: bool = True
) -> list[Finding]:
    """Warn on every free function repeating an earlier (name, version) pair.

    Two declarations without a version only count as duplicates when
    ``flag_unversioned`` is set.
    """
    seen: set[tuple[str, str | None]] = set()
    findings: list[Finding] = []
    for symbol in table.all_symbols():
        if not isinstance(symbol, FunctionSymbol):
            continue
        if symbol.version is None and not flag_unversioned:
            continue
        key = (symbol.name, symbol.version)
        if key in seen:
            version = f" (version: {symbol.version})" if symbol.version else ""
            findings.append(
                Finding(
                    code="duplicate_function",
                    message=f"Duplicate function definition: {symbol.name}{version}",
                    severity="warning",
                    position=symbol.position,
                )
            )
        seen.add(key)
    return findings


def run_checks(text: str, config: ChecksConfig | None = None) -> list[Finding]:
    """Run the enabled checks over one document, ordered by position."""
    config = config or ChecksConfig()
    findings: list[Finding] = []
    if config.check_brackets:
        findings.extend(check_brackets(text))
    findings.extend(
        check_duplicates(
            parse_document(text),
            flag_unversioned=config.flag_unversioned_duplicates,
        )
    )
    findings.sort(key=lambda f: f.position.offset)
    return findings


__all__ = ["check_brackets", "check_duplicates", "run_checks"]
