"""Workspace symbol search hits and document outline models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from models.symbols import Position, SymbolKind


class WorkspaceSymbolHit(BaseModel):
    """One workspace symbol search result."""

    name: str
    kind: SymbolKind
    path: str
    position: Position
    container: str = Field(default="", description="Owning class for methods")
    detail: str = Field(default="", description="@labels (v<version>) - doc")


class OutlineEntry(BaseModel):
    name: str
    kind: SymbolKind
    position: Position
    detail: str = ""


class OutlineGroup(BaseModel):
    """Symbols sharing one label, or the trailing ``Unlabeled`` group."""

    label: str
    start_line: int
    end_line: int
    entries: list[OutlineEntry] = Field(default_factory=list)


__all__ = ["OutlineEntry", "OutlineGroup", "WorkspaceSymbolHit"]
