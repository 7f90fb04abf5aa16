"""Model namespace for ldlmap records."""

from models.completion import CompletionCandidate, Finding
from models.navigation import OutlineEntry, OutlineGroup, WorkspaceSymbolHit
from models.refs import DefinitionResult, RefRecord, SourceSpan
from models.symbols import (
    ClassSymbol,
    ConstantSymbol,
    FunctionSymbol,
    LocatedSymbol,
    MacroSymbol,
    MethodSymbol,
    PipelineSymbol,
    Position,
    Symbol,
    TypeAliasSymbol,
)

__all__ = [
    "ClassSymbol",
    "CompletionCandidate",
    "ConstantSymbol",
    "DefinitionResult",
    "Finding",
    "FunctionSymbol",
    "LocatedSymbol",
    "MacroSymbol",
    "MethodSymbol",
    "OutlineEntry",
    "OutlineGroup",
    "PipelineSymbol",
    "Position",
    "RefRecord",
    "SourceSpan",
    "Symbol",
    "TypeAliasSymbol",
    "WorkspaceSymbolHit",
]
