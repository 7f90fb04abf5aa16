"""Find-all-references by line-oriented pattern matching."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from models.refs import RefRecord, SourceSpan, build_ref_id
from parse.scanner import LineIndex, in_comment_or_string
from parse.symbols import parse_document

if TYPE_CHECKING:
    from collections.abc import Mapping

    from models.refs import RefKind
    from workspace.index import CancellationToken, WorkspaceIndex

# Lower rank wins when several patterns hit the same column.
_KIND_RANK: dict[str, int] = {"declaration": 0, "call": 1, "type": 2, "member": 3, "name": 4}


def _patterns(name: str) -> list[tuple[RefKind, re.Pattern[str]]]:
    escaped = re.escape(name)
    return [
        ("call", re.compile(rf"\b({escaped})\s*\(")),
        ("name", re.compile(rf"\b({escaped})\b(?!\s*[:(=])")),
        ("type", re.compile(rf"(?::|extends)\s+({escaped})\b")),
        ("member", re.compile(rf"\.\s*({escaped})\b")),
    ]


def _record(path: str, line: int, col: int, kind: RefKind, name: str) -> RefRecord:
    return RefRecord(
        ref_id=build_ref_id(path, line, col, kind, name),
        ref_kind=kind,
        src_span=SourceSpan(
            path=path,
            start_line=line,
            start_col=col,
            end_line=line,
            end_col=col + len(name),
        ),
        expr=name,
    )


def find_references_in_text(
    text: str,
    name: str,
    path: str = "",
    *,
    include_declarations: bool = False,
) -> list[RefRecord]:
    """All uses of ``name`` in one document, sorted by position.

    Matches inside ``//``/``///`` comments and string literals are dropped.
    One record is kept per (line, col).
    """
    if not name:
        return []

    hits: dict[tuple[int, int], RefKind] = {}

    def add(line: int, col: int, kind: RefKind) -> None:
        current = hits.get((line, col))
        if current is None or _KIND_RANK[kind] < _KIND_RANK[current]:
            hits[(line, col)] = kind

    patterns = _patterns(name)
    for line_no, line in enumerate(text.split("\n"), start=1):
        if name not in line:
            continue
        for kind, pattern in patterns:
            for match in pattern.finditer(line):
                start = match.start(1)
                if in_comment_or_string(line, start):
                    continue
                add(line_no, start + 1, kind)

    if include_declarations:
        lines = LineIndex(text)
        for symbol in parse_document(text).find_all(name):
            position = lines.position(symbol.position.offset)
            add(position.line, position.col, "declaration")

    return [
        _record(path, line, col, kind, name)
        for (line, col), kind in sorted(hits.items())
    ]


async def find_references(
    index: WorkspaceIndex,
    name: str,
    *,
    include_declarations: bool = False,
    open_documents: Mapping[str, str] | None = None,
    cancel: CancellationToken | None = None,
) -> list[RefRecord]:
    """Search every workspace document for ``name``.

    ``open_documents`` maps identities to unsaved text that should be
    searched instead of the stored content. Cancellation returns the
    references found so far.
    """
    open_documents = open_documents or {}
    refs: list[RefRecord] = []
    for identity, text in open_documents.items():
        refs.extend(
            find_references_in_text(
                text, name, identity, include_declarations=include_declarations
            )
        )
    async for identity, text in index.iter_documents(
        cancel=cancel, exclude=set(open_documents)
    ):
        refs.extend(
            find_references_in_text(
                text, name, identity, include_declarations=include_declarations
            )
        )
    return refs


__all__ = ["find_references", "find_references_in_text"]
