"""Pattern-driven symbol extraction for LDL documents.

There is no grammar: each construct family is found with its own pattern,
and structure (class bodies, strings) is recovered with the helpers in
``parse.scanner``. Parsing is total; text that matches nothing simply yields
no symbols.
"""

from __future__ import annotations

import re

from models.symbols import (
    ClassSymbol,
    ConstantSymbol,
    FunctionSymbol,
    MacroSymbol,
    MethodSymbol,
    PipelineSymbol,
    TypeAliasSymbol,
)
from parse.scanner import LineIndex, find_block_end, is_inside_type_body
from parse.symbol_table import SymbolTable

_VERSIONED_SIGNATURE = r'(\w+)(?:\s*\([^)]*version\s*:\s*"([^"]+)"[^)]*\))?'

_CLASS_PATTERN = re.compile(r"\bclass\s+(\w+)(?:\s+extends\s+(\w+))?")
_METHOD_PATTERN = re.compile(r"(static\s+)?\bfn\s+" + _VERSIONED_SIGNATURE)
_FUNCTION_PATTERN = re.compile(
    r"(?:^|\n)\s*(\bfn\s+" + _VERSIONED_SIGNATURE + ")", re.MULTILINE
)
_PIPELINE_PATTERN = re.compile(r"\bpipeline\s+(\w+)")
_ALIAS_PATTERN = re.compile(r"\b(?:using|alias)\s+(\w+)\s*=\s*(\w+)")
_MACRO_PATTERN = re.compile(r"\bmacro\s+(\w+)[ \t]+([^\r\n]+)")
_CONST_PATTERN = re.compile(r"\bconst\s+(\w+)[ \t]*=[ \t]*([^\r\n]+)")

_LABEL_ANNOTATION = re.compile(r"""^@label\(["']([^"']+)["']\)$""")
_DOC_MARKER = "///"

DECLARATION_KEYWORDS: tuple[str, ...] = (
    "fn",
    "pipeline",
    "class",
    "using",
    "alias",
    "macro",
    "const",
)


def _leading_annotations(text: str, offset: int) -> tuple[tuple[str, ...], str | None]:
    """Collect ``@label`` values and the closest ``///`` doc line above ``offset``.

    Scans backward line by line. Blank lines, other annotations and plain
    comments are skipped; any other line ends the scan.
    """
    labels: list[str] = []
    documentation: str | None = None

    end = offset
    while True:
        start = text.rfind("\n", 0, end) + 1
        line = text[start:end].strip()

        label_match = _LABEL_ANNOTATION.match(line)
        if label_match:
            labels.insert(0, label_match.group(1))
        elif line.startswith(_DOC_MARKER):
            if documentation is None:
                documentation = line[len(_DOC_MARKER) :].strip()
        elif line and not line.startswith("@") and not line.startswith("//"):
            break

        if start == 0:
            break
        end = start - 1

    return tuple(labels), documentation


def _extract_functions(text: str, lines: LineIndex, table: SymbolTable) -> None:
    for match in _FUNCTION_PATTERN.finditer(text):
        start = match.start(1)
        if is_inside_type_body(text, start):
            # Methods are collected from their class body instead.
            continue
        labels, documentation = _leading_annotations(text, start)
        table.add(
            FunctionSymbol(
                name=match.group(2),
                position=lines.position(start),
                version=match.group(3),
                labels=labels,
                documentation=documentation,
            )
        )


def _extract_methods(
    text: str,
    lines: LineIndex,
    table: SymbolTable,
    class_name: str,
    class_start: int,
) -> None:
    body = text[class_start : find_block_end(text, class_start)]
    for match in _METHOD_PATTERN.finditer(body):
        start = class_start + match.start()
        labels, documentation = _leading_annotations(text, start)
        table.add(
            MethodSymbol(
                name=match.group(2),
                position=lines.position(start),
                owner=class_name,
                version=match.group(3),
                is_static=match.group(1) is not None,
                labels=labels,
                documentation=documentation,
            )
        )


def _extract_classes(text: str, lines: LineIndex, table: SymbolTable) -> None:
    for match in _CLASS_PATTERN.finditer(text):
        labels, documentation = _leading_annotations(text, match.start())
        class_name = match.group(1)
        table.add(
            ClassSymbol(
                name=class_name,
                position=lines.position(match.start()),
                parent=match.group(2),
                labels=labels,
                documentation=documentation,
            )
        )
        _extract_methods(text, lines, table, class_name, match.start())


def _extract_pipelines(text: str, lines: LineIndex, table: SymbolTable) -> None:
    for match in _PIPELINE_PATTERN.finditer(text):
        labels, documentation = _leading_annotations(text, match.start())
        table.add(
            PipelineSymbol(
                name=match.group(1),
                position=lines.position(match.start()),
                labels=labels,
                documentation=documentation,
            )
        )


def _extract_single_line_declarations(
    text: str, lines: LineIndex, table: SymbolTable
) -> None:
    for match in _ALIAS_PATTERN.finditer(text):
        labels, documentation = _leading_annotations(text, match.start())
        table.add(
            TypeAliasSymbol(
                name=match.group(1),
                position=lines.position(match.start()),
                target=match.group(2),
                labels=labels,
                documentation=documentation,
            )
        )

    for pattern, model in ((_MACRO_PATTERN, MacroSymbol), (_CONST_PATTERN, ConstantSymbol)):
        for match in pattern.finditer(text):
            labels, documentation = _leading_annotations(text, match.start())
            table.add(
                model(
                    name=match.group(1),
                    position=lines.position(match.start()),
                    value=match.group(2).strip(),
                    labels=labels,
                    documentation=documentation,
                )
            )


def parse_document(text: str) -> SymbolTable:
    """Parse one document into a fresh symbol table.

    Free functions are extracted first, so a free function always precedes a
    same-named method in its bucket. Then classes (each followed by its
    methods), pipelines, type aliases, macros and constants.

    Args:
        text: Full document text.

    Returns:
        A new SymbolTable; callers replace any previous table wholesale.
    """
    lines = LineIndex(text)
    table = SymbolTable()

    _extract_functions(text, lines, table)
    _extract_classes(text, lines, table)
    _extract_pipelines(text, lines, table)
    _extract_single_line_declarations(text, lines, table)

    return table


__all__ = ["DECLARATION_KEYWORDS", "parse_document"]
