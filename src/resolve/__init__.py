"""Definition, reference and symbol navigation over the workspace index."""

from resolve.definition import resolve_definition
from resolve.outline import build_outline
from resolve.references import find_references, find_references_in_text
from resolve.workspace_symbols import search_workspace_symbols

__all__ = [
    "build_outline",
    "find_references",
    "find_references_in_text",
    "resolve_definition",
    "search_workspace_symbols",
]
