"""Cursor context classification.

Classification only looks at the current line: the text before the cursor
and, for parameter lists, the text after it. Rules are tried in a fixed
order and the first one that matches wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from utils import last_word, trailing_identifier


class CompletionContextKind(str, Enum):
    LABEL = "label"
    CALL = "call"
    KEYWORD = "keyword"
    TYPE = "type"
    PARAMETER = "parameter"
    VERSION = "version"
    VARIABLE = "variable"
    INTELLIGENT = "intelligent"


# ASCII so that CJK text never counts as an identifier.
_PARTIAL = r"(?:[A-Za-z_]\w*)?"

_LABEL_RULES = (
    re.compile(r"""@label\(\s*["']?$"""),
    re.compile(r"""@label\(\s*["'][^"']*$"""),
)
_CALL_RULES = (
    re.compile(r"^\s*" + _PARTIAL + "$", re.ASCII),
    re.compile(r"[\s{}(),]\s*" + _PARTIAL + "$", re.ASCII),
)
_KEYWORD_RULES = (
    re.compile(r"^\s*[a-zA-Z]*$"),
    re.compile(r"\b(?:let|return|if|else|for|while)\s+[a-zA-Z]*$"),
)
_TYPE_RULES = (
    re.compile(r":\s*" + _PARTIAL + "$", re.ASCII),
    re.compile(r"->\s*" + _PARTIAL + "$", re.ASCII),
)
_VERSION_RULE = re.compile(r"""version\s*:\s*["']?[^"']*$""")
_VARIABLE_RULES = (
    re.compile(r"\b(?:let|const)\s+\w*$", re.ASCII),
    re.compile(r"^\s*\w*$", re.ASCII),
    re.compile(r"[=\s]\w*$", re.ASCII),
)
_IDENTIFIER = re.compile(r"^[a-zA-Z_]\w*$", re.ASCII)

_NO_VARIABLE_OVERLAY = frozenset(
    {
        CompletionContextKind.LABEL,
        CompletionContextKind.VERSION,
        CompletionContextKind.TYPE,
        CompletionContextKind.VARIABLE,
    }
)


@dataclass(frozen=True)
class Classification:
    """Winning context plus what the ranker and overlay need from the line."""

    kind: CompletionContextKind
    partial: str
    include_variables: bool


def _any(rules: tuple[re.Pattern[str], ...], text: str) -> bool:
    return any(rule.search(text) for rule in rules)


def is_parameter_position(before: str, after: str) -> bool:
    """Inside an unclosed ``(`` whose ``)`` appears later on the line."""
    return before.rfind("(") > before.rfind(")") and ")" in after


def _primary_kind(before: str, after: str) -> CompletionContextKind:
    if _any(_LABEL_RULES, before):
        return CompletionContextKind.LABEL
    if _any(_CALL_RULES, before):
        return CompletionContextKind.CALL
    if _any(_KEYWORD_RULES, before):
        return CompletionContextKind.KEYWORD
    if _any(_TYPE_RULES, before):
        return CompletionContextKind.TYPE
    if is_parameter_position(before, after):
        return CompletionContextKind.PARAMETER
    if _VERSION_RULE.search(before):
        return CompletionContextKind.VERSION
    if _any(_VARIABLE_RULES, before):
        return CompletionContextKind.VARIABLE
    return CompletionContextKind.INTELLIGENT


def classify(before: str, after: str = "") -> Classification:
    """Classify the cursor given the line text on either side of it."""
    kind = _primary_kind(before, after)
    word = last_word(before)
    include_variables = (
        kind not in _NO_VARIABLE_OVERLAY and bool(_IDENTIFIER.match(word))
    )
    return Classification(
        kind=kind,
        partial=trailing_identifier(before),
        include_variables=include_variables,
    )


__all__ = [
    "Classification",
    "CompletionContextKind",
    "classify",
    "is_parameter_position",
]
