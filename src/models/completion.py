"""Completion candidate and advisory finding models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from models.symbols import Position

CandidateKind = Literal[
    "function",
    "pipeline",
    "method",
    "class",
    "keyword",
    "type",
    "label",
    "parameter",
    "version",
    "variable",
    "constant",
]

# Tier 0 candidates come from the workspace; tier 1 are catalog suggestions.
TIER_GROUNDED = 0
TIER_SUGGESTED = 1


class CompletionCandidate(BaseModel):
    """A single proposed completion. Transient, never persisted."""

    model_config = ConfigDict(frozen=True)

    label: str
    kind: CandidateKind
    insert_text: str
    detail: str = ""
    documentation: str = ""
    sort_key: str = ""
    tier: int = TIER_GROUNDED
    source: str = ""
    rationale: str = ""
    context: str = ""


Severity = Literal["error", "warning", "information"]


class Finding(BaseModel):
    """An advisory diagnostic produced by the rule checks."""

    code: str
    message: str
    severity: Severity
    position: Position


__all__ = [
    "TIER_GROUNDED",
    "TIER_SUGGESTED",
    "CandidateKind",
    "CompletionCandidate",
    "Finding",
    "Severity",
]
