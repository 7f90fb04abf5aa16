"""Catalog and workspace candidate generators, and the per-context registry."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from completion.context import CompletionContextKind
from completion.intelligent import (
    ChainingGenerator,
    ConditionalGenerator,
    FrequentSymbolsGenerator,
    LearningPatternGenerator,
    LoopGenerator,
    NearbySymbolsGenerator,
    RelatedFunctionsGenerator,
    SemanticKeywordGenerator,
)
from completion.request import symbol_candidate
from completion.variables import VariableGenerator
from models.completion import TIER_SUGGESTED, CompletionCandidate
from models.symbols import CALLABLE_KINDS, ClassSymbol, TypeAliasSymbol, version_of

if TYPE_CHECKING:
    from completion.request import CandidateGenerator, CompletionRequest

COMMON_LABELS: tuple[str, ...] = (
    "learning",
    "reading",
    "memory",
    "analysis",
    "thinking",
    "philosophy",
    "science",
    "mathematics",
    "language",
    "academic",
    "practical",
    "beginner",
    "intermediate",
    "advanced",
    "visual",
    "auditory",
    "kinesthetic",
    "systematic",
    "creative",
)

# (keyword, description, snippet)
KEYWORDS: tuple[tuple[str, str, str], ...] = (
    ("fn", "function declaration", "fn ${1:name}(${2:params}) -> ${3:Type} {\n\t$0\n}"),
    ("pipeline", "pipeline declaration", "pipeline ${1:name} {\n\t$0\n}"),
    ("class", "class declaration", "class ${1:Name} {\n\t$0\n}"),
    ("using", "type alias", "using ${1:AliasName} = ${2:Type}"),
    ("macro", "macro definition", "macro ${1:NAME} ${2:value}"),
    ("const", "constant definition", "const ${1:NAME} = ${2:value}"),
    ("let", "variable declaration", "let ${1:name} = ${2:value}"),
    ("return", "return statement", "return ${1:value}"),
    ("if", "conditional", "if ${1:condition} {\n\t$0\n}"),
    ("else", "else branch", "else {\n\t$0\n}"),
    ("for", "for loop", "for ${1:item} in ${2:collection} {\n\t$0\n}"),
    ("while", "while loop", "while ${1:condition} {\n\t$0\n}"),
    (
        "match",
        "pattern match",
        "match ${1:value} {\n\t${2:pattern} => ${3:action},\n\t_ => ${4:default}\n}",
    ),
)

BASIC_TYPES: tuple[tuple[str, str], ...] = (
    ("str", "string"),
    ("int", "integer"),
    ("float", "floating point number"),
    ("bool", "boolean"),
    ("void", "no value"),
)

DOMAIN_TYPES: tuple[tuple[str, str], ...] = (
    ("Steps", "LDL step sequence"),
    ("Args", "LDL argument bundle"),
    ("AnalysisSteps", "analysis step sequence"),
    ("ResearchMethod", "research method"),
    ("LearningOutcome", "learning outcome"),
)

COMMON_PARAMETERS: tuple[tuple[str, str], ...] = (
    ("target", "target object or content"),
    ("depth", "depth or level of detail"),
    ("version", "overload version"),
    ("context", "surrounding context"),
    ("scope", "scope or range"),
    ("level", "level"),
    ("mode", "mode of operation"),
    ("type", "kind or category"),
    ("format", "output format"),
    ("criteria", "criteria or conditions"),
    ("duration", "duration"),
    ("intensity", "intensity"),
    ("method", "method"),
    ("strategy", "strategy"),
)

COMMON_VERSIONS: tuple[str, ...] = (
    "basic",
    "advanced",
    "academic",
    "practical",
    "simplified",
    "enhanced",
)

_ENCLOSING_CALL = re.compile(r"""(\w+)\s*\([^)]*version\s*:\s*["']?[^"']*$""")


class LabelGenerator:
    """Labels already used in the workspace, then catalog labels not yet used."""

    @property
    def name(self) -> str:
        return "labels"

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]:
        existing = set(request.labels)
        candidates = [
            CompletionCandidate(
                label=label,
                kind="label",
                insert_text=label,
                detail="existing label",
                source=self.name,
            )
            for label in request.labels
        ]
        candidates.extend(
            CompletionCandidate(
                label=label,
                kind="label",
                insert_text=label,
                detail="suggested label",
                tier=TIER_SUGGESTED,
                source=self.name,
            )
            for label in COMMON_LABELS
            if label not in existing
        )
        return candidates


class CallableGenerator:
    """Every function, pipeline and method in the workspace."""

    @property
    def name(self) -> str:
        return "callables"

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]:
        return [
            symbol_candidate(located.symbol, source=self.name)
            for located in request.symbols
            if located.symbol.kind in CALLABLE_KINDS
        ]


class KeywordGenerator:
    @property
    def name(self) -> str:
        return "keywords"

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]:
        return [
            CompletionCandidate(
                label=keyword,
                kind="keyword",
                insert_text=snippet,
                detail=description,
                source=self.name,
            )
            for keyword, description, snippet in KEYWORDS
        ]


class TypeGenerator:
    """Primitive and domain types, then workspace aliases and classes."""

    @property
    def name(self) -> str:
        return "types"

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]:
        candidates = [
            CompletionCandidate(
                label=type_name,
                kind="type",
                insert_text=type_name,
                detail=description,
                source=self.name,
            )
            for type_name, description in (*BASIC_TYPES, *DOMAIN_TYPES)
        ]
        for located in request.symbols:
            symbol = located.symbol
            if isinstance(symbol, TypeAliasSymbol):
                detail = f"alias -> {symbol.target}"
            elif isinstance(symbol, ClassSymbol):
                detail = f"class extends {symbol.parent}" if symbol.parent else "class"
            else:
                continue
            candidates.append(
                symbol_candidate(symbol, source=self.name, detail=detail)
            )
        return candidates


class ParameterGenerator:
    @property
    def name(self) -> str:
        return "parameters"

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]:
        return [
            CompletionCandidate(
                label=param,
                kind="parameter",
                insert_text=f"{param}: $1",
                detail=description,
                source=self.name,
            )
            for param, description in COMMON_PARAMETERS
        ]


class VersionGenerator:
    """Versions already declared for the enclosing call, then catalog names."""

    @property
    def name(self) -> str:
        return "versions"

    def generate(self, request: CompletionRequest) -> list[CompletionCandidate]:
        match = _ENCLOSING_CALL.search(request.before)
        if not match:
            return []
        function_name = match.group(1)

        versions: dict[str, None] = {}
        for located in request.symbols:
            if located.symbol.name != function_name:
                continue
            version = version_of(located.symbol)
            if version:
                versions.setdefault(version)

        candidates = [
            CompletionCandidate(
                label=version,
                kind="version",
                insert_text=version,
                detail=f"version of {function_name}",
                source=self.name,
            )
            for version in versions
        ]
        candidates.extend(
            CompletionCandidate(
                label=version,
                kind="version",
                insert_text=version,
                detail="common version name",
                tier=TIER_SUGGESTED,
                source=self.name,
            )
            for version in COMMON_VERSIONS
            if version not in versions
        )
        return candidates


INTELLIGENT_GENERATORS: tuple[CandidateGenerator, ...] = (
    RelatedFunctionsGenerator(),
    FrequentSymbolsGenerator(),
    NearbySymbolsGenerator(),
    LearningPatternGenerator(),
    SemanticKeywordGenerator(),
    ChainingGenerator(),
    ConditionalGenerator(),
    LoopGenerator(),
)

VARIABLE_OVERLAY: CandidateGenerator = VariableGenerator()

DEFAULT_REGISTRY: dict[CompletionContextKind, tuple[CandidateGenerator, ...]] = {
    CompletionContextKind.LABEL: (LabelGenerator(),),
    CompletionContextKind.CALL: (CallableGenerator(),),
    CompletionContextKind.KEYWORD: (KeywordGenerator(),),
    CompletionContextKind.TYPE: (TypeGenerator(),),
    CompletionContextKind.PARAMETER: (ParameterGenerator(),),
    CompletionContextKind.VERSION: (VersionGenerator(),),
    CompletionContextKind.VARIABLE: (VARIABLE_OVERLAY,),
    CompletionContextKind.INTELLIGENT: INTELLIGENT_GENERATORS,
}


def generate_candidates(
    request: CompletionRequest,
    registry: dict[CompletionContextKind, tuple[CandidateGenerator, ...]] | None = None,
    overlay: CandidateGenerator | None = VARIABLE_OVERLAY,
) -> list[CompletionCandidate]:
    """Run the generators registered for the request's context, then the overlay."""
    registry = DEFAULT_REGISTRY if registry is None else registry
    classification = request.classification

    candidates: list[CompletionCandidate] = []
    for generator in registry.get(classification.kind, ()):
        candidates.extend(generator.generate(request))

    if overlay is not None and classification.include_variables:
        candidates.extend(overlay.generate(request))

    return candidates


__all__ = [
    "BASIC_TYPES",
    "COMMON_LABELS",
    "COMMON_PARAMETERS",
    "COMMON_VERSIONS",
    "DEFAULT_REGISTRY",
    "DOMAIN_TYPES",
    "INTELLIGENT_GENERATORS",
    "KEYWORDS",
    "VARIABLE_OVERLAY",
    "CallableGenerator",
    "KeywordGenerator",
    "LabelGenerator",
    "ParameterGenerator",
    "TypeGenerator",
    "VersionGenerator",
    "generate_candidates",
]
