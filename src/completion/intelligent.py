"""Heuristic suggestion strategies for the fallback context.

Each strategy is an independent generator; their candidates are simply
concatenated and left for the ranker to order.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from rapidfuzz.distance import Levenshtein

from completion.request import symbol_candidate
from models.completion import TIER_SUGGESTED, CompletionCandidate

if TYPE_CHECKING:
    from completion.request import CompletionRequest
    from models.symbols import Symbol

RELATED_LIMIT = 5
FREQUENT_LIMIT = 5
RECENT_LIMIT = 10
NEARBY_LIMIT = 3
LEARNING_LIMIT = 3
CHAIN_LIMIT = 3
HEURISTIC_LIMIT = 2

# Trigger words -> canonical method names. Only the first matching entry is used.
SEMANTIC_PATTERNS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("学习", "learn"), ("SQ3R", "cornell_notes", "mind_mapping", "spaced_repetition")),
    (("阅读", "read"), ("SQ3R", "skimming", "intensive_reading", "critical_reading")),
    (
        ("记忆", "memor"),
        ("spaced_repetition", "memory_palace", "mnemonics", "active_recall"),
    ),
    (
        ("分析", "analy"),
        ("SWOT_analysis", "root_cause_analysis", "fishbone_diagram"),
    ),
    (
        ("思考", "think"),
        ("critical_thinking", "lateral_thinking", "systems_thinking"),
    ),
    (
        ("研究", "research"),
        ("literature_review", "hypothesis_testing", "data_collection"),
    ),
    (("写作", "writ"), ("brainstorming", "outlining", "revision", "peer_review")),
    (
        ("解决问题", "problem"),
        ("problem_identification", "root_cause_analysis", "solution_generation"),
    ),
)

CONDITIONAL_HINTS = ("check", "validate", "verify")
LOOP_HINTS = ("process", "apply", "execute")

_JUST_CALLED = re.compile(r"(\w+)\(\)\s*$")
_CONDITIONAL = re.compile(r"\b(?:if|else)\s+")
_LOOP = re.compile(r"\b(?:for|while)\s+")


def trigger_matches(trigger: str, text: str) -> bool:
    """ASCII triggers must start a word; CJK triggers match anywhere."""
    if trigger.isascii():
        return re.search(r"\b" + re.escape(trigger), text, re.ASCII) is not None
    return trigger in text


def name_similarity(a: str, b: str) -> float:
    """1 - edit distance / longer length."""
    return Levenshtein.normalized_similarity(a, b)


def _functions(request: CompletionRequest) -> list[Symbol]:
    return [
        located.symbol
        for located in request.symbols
        if located.symbol.kind == "function"
    ]


class RelatedFunctionsGenerator:
    """Functions sharing a label with, or named like, the enclosing function."""

    @property
    def name(self) -> str:
        return "related"

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]:
        current = request.current_function
        if not current:
            return []
        current_symbol = request.find_symbol(current)
        current_labels = set(current_symbol.labels) if current_symbol else set()
        threshold = request.config.similarity_threshold

        related = [
            symbol
            for symbol in _functions(request)
            if symbol.name != current
            and (
                current_labels.intersection(symbol.labels)
                or name_similarity(symbol.name, current) > threshold
            )
        ]
        return [
            symbol_candidate(
                symbol,
                source=self.name,
                detail=f"related to {current}",
                rationale="shares a label or a similar name with the enclosing function",
            )
            for symbol in related[:RELATED_LIMIT]
        ]


class FrequentSymbolsGenerator:
    """Most frequently accepted symbols, then the rest of the recent history.

    Silent until something has been accepted. Labels no longer declared in
    the workspace are skipped.
    """

    @property
    def name(self) -> str:
        return "frequent"

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]:
        recent = request.learner.recent(RECENT_LIMIT)
        if not recent:
            return []

        candidates = []
        seen: set[str] = set()
        for stats in request.learner.most_frequent(FREQUENT_LIMIT):
            seen.add(stats.symbol)
            symbol = request.find_symbol(stats.symbol)
            if symbol is None:
                continue
            candidates.append(
                symbol_candidate(
                    symbol,
                    source=self.name,
                    detail=f"used {stats.frequency} times",
                    rationale="frequently accepted",
                )
            )

        for label in reversed(recent):
            if label in seen:
                continue
            seen.add(label)
            symbol = request.find_symbol(label)
            if symbol is None:
                continue
            candidates.append(
                symbol_candidate(
                    symbol,
                    source=self.name,
                    detail="recently used",
                    rationale="accepted recently",
                )
            )
        return candidates


class NearbySymbolsGenerator:
    """Callables declared within a few lines of the cursor, nearest first."""

    @property
    def name(self) -> str:
        return "nearby"

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]:
        window = request.config.proximity_window
        nearby = [
            symbol
            for symbol in request.document.all_symbols()
            if abs(symbol.position.line - request.line) <= window
        ]
        nearby.sort(key=lambda s: abs(s.position.line - request.line))
        return [
            symbol_candidate(
                symbol,
                source=self.name,
                detail=f"defined nearby (line {symbol.position.line})",
                rationale="declared close to the cursor",
            )
            for symbol in nearby[:NEARBY_LIMIT]
            if symbol.kind in ("function", "method")
        ]


class LearningPatternGenerator:
    @property
    def name(self) -> str:
        return "learning"

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]:
        if "learn" not in request.before and "study" not in request.before:
            return []
        learning = [
            located.symbol
            for located in request.symbols
            if "learning" in located.symbol.labels
        ]
        return [
            symbol_candidate(
                symbol,
                source=self.name,
                detail="learning method",
                rationale="line mentions learning",
            )
            for symbol in learning[:LEARNING_LIMIT]
        ]


class SemanticKeywordGenerator:
    """Maps trigger words on the line to well-known method names.

    A workspace symbol whose name overlaps the canonical name is offered in
    its place; otherwise the canonical name is offered as a suggestion.
    """

    @property
    def name(self) -> str:
        return "semantic"

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]:
        text = request.before.lower()
        for triggers, methods in SEMANTIC_PATTERNS:
            trigger = next((t for t in triggers if trigger_matches(t, text)), None)
            if trigger is None:
                continue
            return [self._candidate(request, trigger, method) for method in methods]
        return []

    def _candidate(
        self, request: CompletionRequest, trigger: str, method: str
    ) -> CompletionCandidate:
        wanted = method.lower()
        for located in request.symbols:
            name = located.symbol.name.lower()
            if name in wanted or wanted in name:
                return symbol_candidate(
                    located.symbol,
                    source=self.name,
                    detail=f'related to "{trigger}"',
                    rationale=f"workspace symbol matching {method}",
                )
        return CompletionCandidate(
            label=method,
            kind="function",
            insert_text=f"{method}($1)$0",
            detail=f'suggested method for "{trigger}"',
            tier=TIER_SUGGESTED,
            source=self.name,
            rationale="not declared in the workspace yet",
        )


class ChainingGenerator:
    """After ``name()``, suggest symbols sharing a label with ``name``."""

    @property
    def name(self) -> str:
        return "chaining"

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]:
        match = _JUST_CALLED.search(request.before)
        if not match:
            return []
        last = match.group(1)
        last_symbol = request.find_symbol(last)
        if last_symbol is None or not last_symbol.labels:
            return []

        related = [
            located.symbol
            for located in request.symbols
            if located.symbol.name != last
            and set(located.symbol.labels).intersection(last_symbol.labels)
        ]
        return [
            symbol_candidate(
                symbol,
                source=self.name,
                detail=f"chain after {last}",
                insert_text=f"\n    {symbol.name}($1)$0",
                rationale="shares a label with the previous call",
            )
            for symbol in related[:CHAIN_LIMIT]
        ]


class _NameHintGenerator:
    trigger: re.Pattern[str]
    hints: tuple[str, ...]
    description: str

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]:
        if not self.trigger.search(request.before):
            return []
        matching = [
            symbol
            for symbol in _functions(request)
            if any(hint in symbol.name for hint in self.hints)
        ]
        return [
            symbol_candidate(
                symbol,
                source=self.name,  # type: ignore[attr-defined]
                detail=self.description,
                insert_text=f"{symbol.name}($1)",
                rationale=self.description,
            )
            for symbol in matching[:HEURISTIC_LIMIT]
        ]


class ConditionalGenerator(_NameHintGenerator):
    trigger = _CONDITIONAL
    hints = CONDITIONAL_HINTS
    description = "common in conditions"

    @property
    def name(self) -> str:
        return "conditional"


class LoopGenerator(_NameHintGenerator):
    trigger = _LOOP
    hints = LOOP_HINTS
    description = "common in loops"

    @property
    def name(self) -> str:
        return "loop"


__all__ = [
    "SEMANTIC_PATTERNS",
    "ChainingGenerator",
    "ConditionalGenerator",
    "FrequentSymbolsGenerator",
    "LearningPatternGenerator",
    "LoopGenerator",
    "NearbySymbolsGenerator",
    "RelatedFunctionsGenerator",
    "SemanticKeywordGenerator",
    "name_similarity",
    "trigger_matches",
]
