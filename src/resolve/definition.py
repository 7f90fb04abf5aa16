"""Go-to-definition across the workspace."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from models.refs import DefinitionResult
from models.symbols import CALLABLE_KINDS, TYPE_LIKE_KINDS, LocatedSymbol
from parse.scanner import LineIndex
from parse.symbols import DECLARATION_KEYWORDS
from utils import word_at

if TYPE_CHECKING:
    from models.symbols import Symbol
    from parse.symbol_table import SymbolTable
    from workspace.index import CancellationToken, WorkspaceIndex

_DECLARING = re.compile(
    r"\b(?:" + "|".join((*DECLARATION_KEYWORDS, "extends")) + r")\s*$"
)
_OWNER = re.compile(r"(\w+)\.$")


def _matching(
    table: SymbolTable,
    name: str,
    *,
    is_call: bool,
    version: str | None,
    owner: str | None,
) -> list[Symbol]:
    if is_call:
        found = table.find_all(name, version=version, owner=owner)
        return [s for s in found if s.kind in CALLABLE_KINDS]
    return [s for s in table.find_all(name) if s.kind in TYPE_LIKE_KINDS]


async def resolve_definition(
    index: WorkspaceIndex,
    identity: str,
    text: str,
    line: int,
    col: int,
    *,
    mtime: float | None = None,
    cancel: CancellationToken | None = None,
) -> DefinitionResult:
    """Resolve the identifier at the 1-based ``line``/``col`` of ``text``.

    Calls (``name(``) resolve to functions, pipelines and methods; anything
    else to classes, aliases, macros and constants. ``owner.name`` and a
    ``version: "..."`` argument narrow the search. Identifiers being declared
    are not resolved.
    """
    lines = LineIndex(text)
    position = lines.position(lines.offset(line, col))
    line_text = lines.line_text(position.line)

    found = word_at(line_text, position.col - 1)
    if found is None:
        return DefinitionResult(status="not_found")
    word, start, end = found

    prefix = line_text[:start]
    if _DECLARING.search(prefix.rstrip()):
        return DefinitionResult(status="not_found", name=word)

    is_call = line_text[end:].lstrip().startswith("(")
    version_match = re.search(
        re.escape(word) + r'\s*\([^)]*version\s*:\s*"([^"]+)"', line_text[start:]
    )
    version = version_match.group(1) if version_match and is_call else None
    owner_match = _OWNER.search(prefix)
    owner = owner_match.group(1) if owner_match else None

    locations: list[LocatedSymbol] = []
    document = index.update(identity, text, mtime)
    for symbol in _matching(
        document, word, is_call=is_call, version=version, owner=owner
    ):
        locations.append(LocatedSymbol(path=identity, symbol=symbol))
    async for path, table in index.iter_tables(cancel=cancel, exclude={identity}):
        for symbol in _matching(
            table, word, is_call=is_call, version=version, owner=owner
        ):
            locations.append(LocatedSymbol(path=path, symbol=symbol))

    if not locations:
        status = "not_found"
    elif len(locations) == 1:
        status = "unique"
    else:
        status = "ambiguous"
    return DefinitionResult(
        status=status,
        name=word,
        owner=owner,
        version=version,
        locations=locations,
    )


__all__ = ["resolve_definition"]
