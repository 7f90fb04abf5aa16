"""Workspace symbol search with ``label:`` and ``type:`` query prefixes."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from models.navigation import WorkspaceSymbolHit
from models.symbols import owner_of, version_of

if TYPE_CHECKING:
    from models.symbols import LocatedSymbol, Symbol
    from workspace.index import CancellationToken, WorkspaceIndex

_LABEL_QUERY = re.compile(r"^@?label:\s*(.+)$", re.IGNORECASE)
_TYPE_QUERY = re.compile(r"^t(?:ype)?:\s*(.+)$", re.IGNORECASE)


def symbol_search_detail(symbol: Symbol) -> str:
    """``@l1 @l2 (v<version>) - <doc>``, omitting absent parts."""
    parts = []
    if symbol.labels:
        parts.append("@" + " @".join(symbol.labels))
    version = version_of(symbol)
    if version:
        parts.append(f"(v{version})")
    detail = " ".join(parts)
    if symbol.documentation:
        detail = f"{detail} - {symbol.documentation}" if detail else symbol.documentation
    return detail


def matches_query(symbol: Symbol, query: str) -> bool:
    """Apply one search query to a symbol.

    ``label:x`` / ``@label:x`` requires the exact label ``x``; ``type:k`` /
    ``t:k`` matches kinds containing ``k`` (``fn`` means function); anything
    else is a case-insensitive substring search over name, labels and
    documentation.
    """
    query = query.strip()
    if not query:
        return True

    label_match = _LABEL_QUERY.match(query)
    if label_match:
        return label_match.group(1).strip() in symbol.labels

    type_match = _TYPE_QUERY.match(query)
    if type_match:
        wanted = type_match.group(1).strip().lower()
        return wanted in symbol.kind or (wanted == "fn" and symbol.kind == "function")

    needle = query.lower()
    if needle in symbol.name.lower():
        return True
    if any(needle in label.lower() for label in symbol.labels):
        return True
    return bool(symbol.documentation and needle in symbol.documentation.lower())


def to_hit(located: LocatedSymbol) -> WorkspaceSymbolHit:
    symbol = located.symbol
    return WorkspaceSymbolHit(
        name=symbol.name,
        kind=symbol.kind,
        path=located.path,
        position=symbol.position,
        container=owner_of(symbol) or "",
        detail=symbol_search_detail(symbol),
    )


async def search_workspace_symbols(
    index: WorkspaceIndex,
    query: str,
    *,
    cancel: CancellationToken | None = None,
) -> list[WorkspaceSymbolHit]:
    """Search every workspace document; an empty query returns all symbols."""
    located = await index.aggregate(lambda s: matches_query(s, query), cancel=cancel)
    return [to_hit(item) for item in located]


__all__ = [
    "matches_query",
    "search_workspace_symbols",
    "symbol_search_detail",
    "to_hit",
]
