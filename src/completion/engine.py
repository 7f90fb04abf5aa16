"""Completion entry point tying classification, generation and ranking together."""

from __future__ import annotations

import re
import time
from typing import TYPE_CHECKING

from loguru import logger

from completion.cache import CompletionCache, build_cache_key
from completion.context import CompletionContextKind, classify
from completion.generators import DEFAULT_REGISTRY, VARIABLE_OVERLAY, generate_candidates
from completion.ranking import Ranker, UsageLearner
from completion.request import CompletionRequest
from models.symbols import LocatedSymbol
from parse.scanner import LineIndex
from rules.config import CompletionConfig

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from completion.request import CandidateGenerator
    from models.completion import CompletionCandidate
    from workspace.index import CancellationToken, WorkspaceIndex

_CURRENT_FUNCTION = re.compile(r"fn\s+(\w+)[^}]*$")


def find_current_function(text_before: str) -> str | None:
    """Name of the last ``fn`` before the cursor with no ``}`` after it."""
    match = _CURRENT_FUNCTION.search(text_before)
    return match.group(1) if match else None


def dedupe_by_label(
    candidates: Iterable[CompletionCandidate],
) -> list[CompletionCandidate]:
    """Keep the first candidate for each label."""
    seen: set[str] = set()
    unique = []
    for candidate in candidates:
        if candidate.label in seen:
            continue
        seen.add(candidate.label)
        unique.append(candidate)
    return unique


def filter_by_partial(
    candidates: Iterable[CompletionCandidate], partial: str
) -> list[CompletionCandidate]:
    """Drop candidates whose label does not contain the partial word."""
    if not partial:
        return list(candidates)
    needle = partial.lower()
    return [c for c in candidates if needle in c.label.lower()]


class CompletionEngine:
    """Answers completion requests for one workspace.

    Owns the usage learner, the ranker and the result cache; the workspace
    index is shared with the resolvers.
    """

    def __init__(
        self,
        index: WorkspaceIndex,
        config: CompletionConfig | None = None,
        learner: UsageLearner | None = None,
        clock: Callable[[], float] = time.time,
        registry: dict[CompletionContextKind, tuple[CandidateGenerator, ...]]
        | None = None,
    ) -> None:
        self.index = index
        self.config = config or CompletionConfig()
        self.learner = learner or UsageLearner(
            history_size=self.config.history_size, clock=clock
        )
        self.ranker = Ranker(self.learner, clock=clock)
        self.cache = CompletionCache(
            ttl_seconds=self.config.cache_ttl_seconds,
            max_entries=self.config.cache_max_entries,
            clock=clock,
        )
        self.registry = DEFAULT_REGISTRY if registry is None else registry

    async def complete(
        self,
        identity: str,
        text: str,
        line: int,
        col: int,
        *,
        mtime: float | None = None,
        cancel: CancellationToken | None = None,
    ) -> list[CompletionCandidate]:
        """Ranked candidates for the 1-based cursor ``line``/``col`` in ``text``.

        ``text`` is the caller's current view of ``identity`` and is indexed
        before the rest of the workspace is consulted. A cancelled workspace
        scan yields candidates from the documents seen so far; such results
        are not cached.
        """
        lines = LineIndex(text)
        offset = lines.offset(line, col)
        position = lines.position(offset)
        line_text = lines.line_text(position.line)
        before = line_text[: position.col - 1]
        after = line_text[position.col - 1 :]

        key = build_cache_key(
            identity, position.line, position.col, before, self.config.cache_key_tail
        )
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Completion cache hit for {key!r}")
            return cached

        started = time.perf_counter()
        classification = classify(before, after)
        document = self.index.update(identity, text, mtime)
        symbols = [LocatedSymbol(path=identity, symbol=s) for s in document]
        symbols += await self.index.aggregate(cancel=cancel, exclude={identity})
        labels = sorted({label for located in symbols for label in located.symbol.labels})

        request = CompletionRequest(
            identity=identity,
            text=text,
            line=position.line,
            col=position.col,
            offset=offset,
            before=before,
            after=after,
            classification=classification,
            document=document,
            symbols=symbols,
            labels=labels,
            learner=self.learner,
            config=self.config,
            current_function=find_current_function(text[:offset]),
        )

        candidates = generate_candidates(request, self.registry, VARIABLE_OVERLAY)
        candidates = filter_by_partial(dedupe_by_label(candidates), classification.partial)
        ranked = [
            candidate.model_copy(update={"context": classification.kind.value})
            for candidate in self.ranker.rank(
                candidates,
                partial=classification.partial,
                current_function=request.current_function,
            )[: self.config.max_results]
        ]

        logger.debug(
            f"{classification.kind.value} completion at {identity}:{position.line}:"
            f"{position.col} produced {len(ranked)} candidates in "
            f"{(time.perf_counter() - started) * 1000:.1f} ms"
        )
        if cancel is None or not cancel.is_cancelled:
            self.cache.put(key, ranked)
        return ranked

    def record_acceptance(
        self,
        candidate: CompletionCandidate | str,
        context: CompletionContextKind | str | None = None,
    ) -> None:
        """Feed an accepted candidate back into the usage learner.

        The usage context defaults to the completion context the candidate
        was offered in.
        """
        label = candidate if isinstance(candidate, str) else candidate.label
        if isinstance(context, CompletionContextKind):
            context = context.value
        if context is None and not isinstance(candidate, str):
            context = candidate.context or None
        self.learner.record(label, context)

    def clear_cache(self) -> None:
        self.cache.clear()


__all__ = [
    "CompletionEngine",
    "dedupe_by_label",
    "filter_by_partial",
    "find_current_function",
]
