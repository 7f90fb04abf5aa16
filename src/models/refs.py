"""Reference models for definition and reference lookups."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from models.symbols import LocatedSymbol

RefKind = Literal["call", "type", "member", "name", "declaration"]
DefinitionStatus = Literal["not_found", "unique", "ambiguous"]


class SourceSpan(BaseModel):
    """Source span for a reference expression."""

    path: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int


class RefRecord(BaseModel):
    """A single use (or declaration) of a symbol name."""

    ref_id: str
    ref_kind: RefKind
    src_span: SourceSpan
    expr: str


class DefinitionResult(BaseModel):
    """Outcome of a go-to-definition request.

    An ``ambiguous`` result lists every candidate declaration; choosing one
    is left to the caller.
    """

    status: DefinitionStatus
    name: str | None = None
    owner: str | None = None
    version: str | None = None
    locations: list[LocatedSymbol] = Field(default_factory=list)

    @property
    def target(self) -> LocatedSymbol | None:
        if self.status == "unique":
            return self.locations[0]
        return None


def build_ref_id(path: str, line: int, col: int, ref_kind: str, expr: str) -> str:
    """Build a deterministic ref_id: ``ref:{path}@L{line}:C{col}:{kind}:{expr}``."""
    return f"ref:{path}@L{line}:C{col}:{ref_kind}:{expr}"


__all__ = [
    "DefinitionResult",
    "DefinitionStatus",
    "RefKind",
    "RefRecord",
    "SourceSpan",
    "build_ref_id",
]
