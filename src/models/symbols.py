"""Symbol models for LDL source documents.

A symbol is one declared entity (function, pipeline, class, method, type
alias, macro or constant). Symbols form a tagged union keyed by ``kind`` so
that each variant carries only the fields relevant to it.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

SymbolKind = Literal[
    "function",
    "pipeline",
    "class",
    "method",
    "type_alias",
    "macro",
    "constant",
]

CALLABLE_KINDS: frozenset[str] = frozenset({"function", "pipeline", "method"})
TYPE_LIKE_KINDS: frozenset[str] = frozenset(
    {"class", "type_alias", "macro", "constant"}
)


class Position(BaseModel):
    """Location inside a document.

    ``offset`` is the 0-based character offset; ``line`` and ``col`` are
    1-based.
    """

    model_config = ConfigDict(frozen=True)

    offset: int
    line: int
    col: int


class _SymbolBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    position: Position
    labels: tuple[str, ...] = ()
    documentation: str | None = None


class FunctionSymbol(_SymbolBase):
    """A free function, optionally tagged with an overload version."""

    kind: Literal["function"] = "function"
    version: str | None = None


class MethodSymbol(_SymbolBase):
    """A function declared inside a class body."""

    kind: Literal["method"] = "method"
    owner: str
    version: str | None = None
    is_static: bool = False


class PipelineSymbol(_SymbolBase):
    kind: Literal["pipeline"] = "pipeline"


class ClassSymbol(_SymbolBase):
    kind: Literal["class"] = "class"
    parent: str | None = None


class TypeAliasSymbol(_SymbolBase):
    kind: Literal["type_alias"] = "type_alias"
    target: str


class MacroSymbol(_SymbolBase):
    kind: Literal["macro"] = "macro"
    value: str


class ConstantSymbol(_SymbolBase):
    kind: Literal["constant"] = "constant"
    value: str


Symbol = Annotated[
    Union[
        FunctionSymbol,
        MethodSymbol,
        PipelineSymbol,
        ClassSymbol,
        TypeAliasSymbol,
        MacroSymbol,
        ConstantSymbol,
    ],
    Field(discriminator="kind"),
]


class LocatedSymbol(BaseModel):
    """A symbol together with the workspace document that declares it."""

    model_config = ConfigDict(frozen=True)

    path: str
    symbol: Symbol


def version_of(symbol: Symbol) -> str | None:
    """Return the overload version of a symbol, if its kind has one."""
    if isinstance(symbol, (FunctionSymbol, MethodSymbol)):
        return symbol.version
    return None


def owner_of(symbol: Symbol) -> str | None:
    """Return the owning class name for methods, else None."""
    if isinstance(symbol, MethodSymbol):
        return symbol.owner
    return None


__all__ = [
    "CALLABLE_KINDS",
    "TYPE_LIKE_KINDS",
    "ClassSymbol",
    "ConstantSymbol",
    "FunctionSymbol",
    "LocatedSymbol",
    "MacroSymbol",
    "MethodSymbol",
    "PipelineSymbol",
    "Position",
    "Symbol",
    "SymbolKind",
    "TypeAliasSymbol",
    "owner_of",
    "version_of",
]
