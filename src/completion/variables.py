"""Variable-name candidates layered on top of most contexts."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from models.completion import TIER_GROUNDED, TIER_SUGGESTED, CompletionCandidate
from parse.scanner import find_block_end
from utils import last_word

if TYPE_CHECKING:
    from completion.request import CompletionRequest

VariableScope = Literal["local", "parameter", "global"]

_ENCLOSING_FUNCTION = re.compile(r"fn\s+(\w+)\s*\(([^)]*)\)[^{]*\{")
_PARAMETER = re.compile(r"(\w+)\s*:\s*([^,=]+)(?:\s*=\s*[^,]*)?")
_LOCAL = re.compile(r"(let|const)\s+(\w+)(?:\s*:\s*([^=]+))?\s*=")
_GLOBAL = re.compile(r"\b(const|macro)\s+(\w+)")
_DECLARING = re.compile(r"\b(?:let|const)\s+\w*$")
_ASSIGNMENT = re.compile(r"\s*=\s*(.+)")
_NUMBER = re.compile(r"^\d+")

# (triggers in the enclosing function name, reason, names)
_DECLARATION_HINTS: tuple[tuple[tuple[str, ...], str, tuple[str, ...]], ...] = (
    (("learn", "study"), "learning context", ("method", "technique")),
    (("analysis", "analyze"), "analysis context", ("result", "data")),
)

_CONTEXTUAL_NAMES: tuple[tuple[tuple[str, ...], str, tuple[str, ...]], ...] = (
    (
        ("learn", "study"),
        "learning method",
        ("steps", "method", "target", "result", "progress"),
    ),
    (
        ("analysis", "analyze"),
        "analysis method",
        ("data", "criteria", "findings", "conclusion"),
    ),
    (("process", "workflow"), "workflow", ("stage", "phase", "queue", "status")),
)
_GENERIC_NAMES = ("temp", "item", "value", "config", "option")


@dataclass(frozen=True)
class VariableInfo:
    name: str
    scope: VariableScope
    type: str | None = None


@dataclass
class ScopeInfo:
    """What is visible at the cursor inside the enclosing function."""

    function_name: str | None = None
    parameters: dict[str, VariableInfo] = field(default_factory=dict)
    variables: dict[str, VariableInfo] = field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return name in self.parameters or name in self.variables


def analyze_scope(text: str, offset: int) -> ScopeInfo:
    """Find the last ``fn name(params) {`` before ``offset`` and read its scope."""
    last = None
    for match in _ENCLOSING_FUNCTION.finditer(text[:offset]):
        last = match
    if last is None:
        return ScopeInfo()

    scope = ScopeInfo(function_name=last.group(1))
    for param in _PARAMETER.finditer(last.group(2)):
        scope.parameters[param.group(1)] = VariableInfo(
            name=param.group(1), scope="parameter", type=param.group(2).strip()
        )

    brace = last.end() - 1
    body = text[brace + 1 : find_block_end(text, brace)]
    for local in _LOCAL.finditer(body):
        annotation = local.group(3).strip() if local.group(3) else None
        scope.variables[local.group(2)] = VariableInfo(
            name=local.group(2), scope="local", type=annotation
        )
    return scope


def _matches(name: str, typed: str) -> bool:
    return not typed or typed.lower() in name.lower()


def _with_type(label: str, info: VariableInfo) -> str:
    return f"{label} ({info.type})" if info.type else label


def _suggested_names(
    request: CompletionRequest, scope: ScopeInfo
) -> list[tuple[str, str]]:
    """(name, reason) pairs for a ``let``/``const`` being declared."""
    suggestions: list[tuple[str, str]] = []

    assignment = _ASSIGNMENT.search(request.after)
    if assignment:
        value = assignment.group(1).strip()
        if value.startswith("["):
            suggestions += [(n, "array assignment") for n in ("items", "list", "steps")]
        if value.startswith(('"', "'")):
            suggestions += [
                (n, "string assignment") for n in ("name", "title", "description")
            ]
        if _NUMBER.match(value):
            suggestions += [(n, "number assignment") for n in ("count", "index", "level")]

    function_name = scope.function_name or ""
    for triggers, reason, names in _DECLARATION_HINTS:
        if any(trigger in function_name for trigger in triggers):
            suggestions += [(n, reason) for n in names]
    return suggestions


class VariableGenerator:
    """Locals, parameters, document globals and suggested variable names.

    Everything is filtered against the last whitespace-separated word before
    the cursor.
    """

    @property
    def name(self) -> str:
        return "variables"

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]:
        typed = last_word(request.before)
        scope = analyze_scope(request.text, request.offset)
        candidates: list[CompletionCandidate] = []

        for info in scope.variables.values():
            if _matches(info.name, typed):
                candidates.append(
                    self._candidate(info.name, _with_type("local variable", info))
                )

        for info in scope.parameters.values():
            if _matches(info.name, typed):
                candidates.append(
                    self._candidate(info.name, _with_type("parameter", info))
                )

        for match in _GLOBAL.finditer(request.text):
            keyword, name = match.group(1), match.group(2)
            if _matches(name, typed):
                detail = "global constant" if keyword == "const" else "macro"
                candidates.append(self._candidate(name, detail, kind="constant"))

        if _DECLARING.search(request.before):
            for name, reason in _suggested_names(request, scope):
                if _matches(name, typed):
                    candidates.append(
                        self._candidate(
                            name, f"suggested name - {reason}", tier=TIER_SUGGESTED
                        )
                    )

        for triggers, context, names in _CONTEXTUAL_NAMES:
            if scope.function_name and any(t in scope.function_name for t in triggers):
                candidates.extend(
                    self._candidate(name, f"contextual - {context}", tier=TIER_SUGGESTED)
                    for name in names
                    if _matches(name, typed) and name not in scope
                )
        candidates.extend(
            self._candidate(name, "contextual - generic", tier=TIER_SUGGESTED)
            for name in _GENERIC_NAMES
            if _matches(name, typed) and name not in scope
        )
        return candidates

    def _candidate(
        self,
        name: str,
        detail: str,
        kind: Literal["variable", "constant"] = "variable",
        tier: int = TIER_GROUNDED,
    ) -> CompletionCandidate:
        return CompletionCandidate(
            label=name,
            kind=kind,
            insert_text=name,
            detail=detail,
            tier=tier,
            source=self.name,
        )


__all__ = ["ScopeInfo", "VariableGenerator", "VariableInfo", "analyze_scope"]
