"""Immutable snapshot handed to every candidate generator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from models.completion import TIER_GROUNDED, CompletionCandidate
from models.symbols import owner_of, version_of

if TYPE_CHECKING:
    from completion.context import Classification
    from completion.ranking import UsageLearner
    from models.symbols import LocatedSymbol, Symbol
    from parse.symbol_table import SymbolTable
    from rules.config import CompletionConfig


@dataclass(frozen=True)
class CompletionRequest:
    """Everything a generator may look at; generators never mutate it.

    ``symbols`` lists the current document's symbols first, followed by the
    rest of the workspace in discovery order.
    """

    identity: str
    text: str
    line: int
    col: int
    offset: int
    before: str
    after: str
    classification: Classification
    document: SymbolTable
    symbols: list[LocatedSymbol]
    labels: list[str]
    learner: UsageLearner
    config: CompletionConfig
    current_function: str | None = None

    def find_symbol(self, name: str) -> Symbol | None:
        for located in self.symbols:
            if located.symbol.name == name:
                return located.symbol
        return None


class CandidateGenerator(Protocol):
    @property
    def name(self) -> str: ...

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]: ...


_CANDIDATE_KINDS = {
    "function": "function",
    "method": "method",
    "pipeline": "pipeline",
    "class": "class",
    "type_alias": "type",
    "macro": "constant",
    "constant": "constant",
}


def call_snippet(symbol: Symbol) -> str:
    """Insertion text for a symbol: a call with a placeholder for callables."""
    if symbol.kind in ("function", "method"):
        return f"{symbol.name}($1)$0"
    return symbol.name


def symbol_detail(symbol: Symbol) -> str:
    """``kind (v<version>) in <owner> @label1 @label2``."""
    detail = symbol.kind
    version = version_of(symbol)
    if version:
        detail += f" (v{version})"
    owner = owner_of(symbol)
    if owner:
        detail += f" in {owner}"
    if symbol.labels:
        detail += " @" + " @".join(symbol.labels)
    return detail


def symbol_candidate(
    symbol: Symbol,
    *,
    source: str,
    detail: str | None = None,
    rationale: str = "",
    insert_text: str | None = None,
    tier: int = TIER_GROUNDED,
) -> CompletionCandidate:
    return CompletionCandidate(
        label=symbol.name,
        kind=_CANDIDATE_KINDS[symbol.kind],  # type: ignore[arg-type]
        insert_text=insert_text if insert_text is not None else call_snippet(symbol),
        detail=detail if detail is not None else symbol_detail(symbol),
        documentation=symbol.documentation or "",
        tier=tier,
        source=source,
        rationale=rationale,
    )


__all__ = [
    "CandidateGenerator",
    "CompletionRequest",
    "call_snippet",
    "symbol_candidate",
    "symbol_detail",
]
