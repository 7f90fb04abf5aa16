"""Label-grouped outline of a single document."""

from __future__ import annotations

from typing import TYPE_CHECKING

from models.navigation import OutlineEntry, OutlineGroup
from models.symbols import (
    ClassSymbol,
    ConstantSymbol,
    FunctionSymbol,
    MacroSymbol,
    MethodSymbol,
    TypeAliasSymbol,
)

if TYPE_CHECKING:
    from models.symbols import Symbol
    from parse.symbol_table import SymbolTable

UNLABELED = "Unlabeled"


def outline_detail(symbol: Symbol) -> str:
    detail = ""
    if isinstance(symbol, FunctionSymbol):
        detail = f"(version: {symbol.version})" if symbol.version else ""
    elif isinstance(symbol, ClassSymbol):
        detail = f"extends {symbol.parent}" if symbol.parent else ""
    elif isinstance(symbol, MethodSymbol):
        detail = f"in {symbol.owner}"
        if symbol.is_static:
            detail = f"static {detail}"
        if symbol.version:
            detail += f" (version: {symbol.version})"
    elif isinstance(symbol, TypeAliasSymbol):
        detail = f"= {symbol.target}"
    elif isinstance(symbol, (MacroSymbol, ConstantSymbol)):
        detail = f"= {symbol.value}" if symbol.value else ""

    if symbol.documentation:
        detail = f"{detail} - {symbol.documentation}" if detail else symbol.documentation
    return detail


def _group(label: str, symbols: list[Symbol]) -> OutlineGroup:
    lines = [s.position.line for s in symbols]
    return OutlineGroup(
        label=label,
        start_line=min(lines),
        end_line=max(lines),
        entries=[
            OutlineEntry(
                name=s.name,
                kind=s.kind,
                position=s.position,
                detail=outline_detail(s),
            )
            for s in symbols
        ],
    )


def build_outline(table: SymbolTable) -> list[OutlineGroup]:
    """One group per label in first-seen order, then ``Unlabeled``.

    A symbol with several labels appears under each of them.
    """
    groups = [_group(label, symbols) for label, symbols in table.label_index().items()]
    unlabeled = [s for s in table.all_symbols() if not s.labels]
    if unlabeled:
        groups.append(_group(UNLABELED, unlabeled))
    return groups


__all__ = ["UNLABELED", "build_outline", "outline_detail"]
