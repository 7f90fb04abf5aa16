from __future__ import annotations

import asyncio
from pathlib import Path

from models.refs import DefinitionResult
from resolve.definition import resolve_definition
from workspace.index import WorkspaceIndex
from workspace.source import InMemorySource

_WORKSPACE = Path(__file__).parent / "fixtures" / "ldl_workspace"


def _index() -> WorkspaceIndex:
    source = InMemorySource()
    for name in ("learning.ldl", "methods/analysis.ldl"):
        source.put(name, (_WORKSPACE / name).read_text(encoding="utf-8"), mtime=1.0)
    return WorkspaceIndex(source)


def _resolve(text: str, line: int, col: int) -> DefinitionResult:
    return asyncio.run(resolve_definition(_index(), "main.ldl", text, line, col))


def test_version_argument_selects_single_overload() -> None:
    text = '    let notes = SQ3R(topic, version: "classic")\n'

    result = _resolve(text, 1, 17)

    assert result.status == "unique"
    assert result.name == "SQ3R"
    assert result.version == "classic"
    assert result.target is not None
    assert result.target.path == "learning.ldl"
    assert result.target.symbol.position.line == 4


def test_call_without_version_is_ambiguous() -> None:
    result = _resolve("SQ3R(topic)\n", 1, 2)

    assert result.status == "ambiguous"
    assert result.target is None
    assert [loc.symbol.version for loc in result.locations] == [  # type: ignore[union-attr]
        "classic",
        "academic",
    ]


def test_cursor_just_after_identifier_still_resolves() -> None:
    result = _resolve('SQ3R(version: "academic")\n', 1, 5)

    assert result.status == "unique"
    assert result.version == "academic"


def test_non_call_resolves_to_type_like_symbols() -> None:
    result = _resolve("let t: Text = x\n", 1, 9)

    assert result.status == "unique"
    assert result.target is not None
    assert result.target.symbol.kind == "type_alias"


def test_non_call_ignores_functions() -> None:
    result = _resolve("let f = SQ3R\n", 1, 10)

    assert result.status == "not_found"
    assert result.name == "SQ3R"


def test_owner_prefix_narrows_to_method() -> None:
    text = "fn tick() {}\nclass Job {\n    fn tick() {}\n}\nJob.tick()\n"

    result = _resolve(text, 5, 5)

    assert result.status == "unique"
    assert result.owner == "Job"
    assert result.target is not None
    assert result.target.path == "main.ldl"
    assert result.target.symbol.kind == "method"


def test_current_document_is_searched_first() -> None:
    text = "fn local_step() {}\nlocal_step()\n"

    result = _resolve(text, 2, 1)

    assert result.status == "unique"
    assert result.target is not None
    assert result.target.path == "main.ldl"


def test_identifier_being_declared_is_not_resolved() -> None:
    result = _resolve("fn SQ3R() {}\n", 1, 4)

    assert result.status == "not_found"
    assert result.name == "SQ3R"
    assert result.locations == []


def test_extends_parent_is_not_resolved() -> None:
    result = _resolve("class Report extends Analyzer {\n}\n", 1, 23)

    assert result.status == "not_found"


def test_no_identifier_under_cursor() -> None:
    result = _resolve("a + b\n", 1, 3)

    assert result.status == "not_found"
    assert result.name is None
