from __future__ import annotations

import asyncio

from models.refs import RefRecord
from resolve.references import find_references, find_references_in_text
from workspace.index import CancellationToken, WorkspaceIndex
from workspace.source import InMemorySource


def _spans(refs: list[RefRecord]) -> list[tuple[int, int, str]]:
    return [(r.src_span.start_line, r.src_span.start_col, r.ref_kind) for r in refs]


def test_string_literal_mentions_are_ignored() -> None:
    refs = find_references_in_text('let s = "SQ3R(x)"\n', "SQ3R")

    assert refs == []


def test_comment_mentions_are_ignored() -> None:
    text = "// SQ3R(x) here\n/// SQ3R docs\nSQ3R(x) // SQ3R again\n"

    refs = find_references_in_text(text, "SQ3R")

    assert _spans(refs) == [(3, 1, "call")]


def test_extends_clause_is_a_type_reference() -> None:
    refs = find_references_in_text("class B extends A {\n", "A", "b.ldl")

    assert _spans(refs) == [(1, 17, "type")]
    assert refs[0].ref_id == "ref:b.ldl@L1:C17:type:A"
    assert refs[0].src_span.end_col == 18


def test_reference_kinds() -> None:
    text = "let t: Text = x\ny = doc.Text\nz = Text\nText(1)\n"

    refs = find_references_in_text(text, "Text")

    assert _spans(refs) == [
        (1, 8, "type"),
        (2, 9, "member"),
        (3, 5, "name"),
        (4, 1, "call"),
    ]


def test_word_boundaries_are_respected() -> None:
    refs = find_references_in_text("SQ3R_extra(1)\nmySQ3R\n", "SQ3R")

    assert refs == []


def test_declarations_only_when_requested() -> None:
    text = "fn SQ3R() {}\nSQ3R()\n"

    without = find_references_in_text(text, "SQ3R")
    with_decls = find_references_in_text(text, "SQ3R", include_declarations=True)

    assert _spans(without) == [(1, 4, "call"), (2, 1, "call")]
    assert _spans(with_decls) == [(1, 1, "declaration"), (1, 4, "call"), (2, 1, "call")]


def test_workspace_search_prefers_open_document_text() -> None:
    source = InMemorySource()
    source.put("a.ldl", "SQ3R()\n", mtime=1.0)
    source.put("b.ldl", "nothing here\n", mtime=1.0)
    index = WorkspaceIndex(source)

    refs = asyncio.run(
        find_references(index, "SQ3R", open_documents={"b.ldl": "x = SQ3R\n"})
    )

    assert [(r.src_span.path, r.ref_kind) for r in refs] == [
        ("b.ldl", "name"),
        ("a.ldl", "call"),
    ]


def test_cancelled_search_returns_nothing_more() -> None:
    source = InMemorySource()
    source.put("a.ldl", "SQ3R()\n", mtime=1.0)
    index = WorkspaceIndex(source)
    token = CancellationToken()
    token.cancel()

    assert asyncio.run(find_references(index, "SQ3R", cancel=token)) == []


def test_empty_name_has_no_references() -> None:
    assert find_references_in_text("anything\n", "") == []
