"""Context-aware completion for LDL documents."""

from completion.cache import CompletionCache
from completion.context import Classification, CompletionContextKind, classify
from completion.engine import CompletionEngine
from completion.generators import DEFAULT_REGISTRY, generate_candidates
from completion.ranking import Ranker, UsageLearner
from completion.request import CompletionRequest

__all__ = [
    "DEFAULT_REGISTRY",
    "Classification",
    "CompletionCache",
    "CompletionContextKind",
    "CompletionEngine",
    "CompletionRequest",
    "Ranker",
    "UsageLearner",
    "classify",
    "generate_candidates",
]
