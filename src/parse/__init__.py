"""Parsing utilities for LDL documents."""

from parse.scanner import (
    LineIndex,
    find_block_end,
    in_comment_or_string,
    is_inside_type_body,
)
from parse.symbol_table import SymbolTable
from parse.symbols import DECLARATION_KEYWORDS, parse_document

__all__ = [
    "DECLARATION_KEYWORDS",
    "LineIndex",
    "SymbolTable",
    "find_block_end",
    "in_comment_or_string",
    "is_inside_type_body",
    "parse_document",
]
