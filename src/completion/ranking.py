"""Usage learning and candidate ranking."""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import orjson
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

    from models.completion import CompletionCandidate

SCORE_CEILING = 1000

PREFIX_BONUS = 100
SUBSTRING_BONUS = 50
FREQUENCY_WEIGHT = 10
FREQUENCY_CAP = 50
ENCLOSING_FUNCTION_BONUS = 25

# (max age in seconds, bonus), checked in order.
RECENCY_BONUSES: tuple[tuple[float, int], ...] = (
    (60.0, 30),
    (300.0, 20),
    (3600.0, 10),
)


class UsageStats(BaseModel):
    """Acceptance counters for one candidate label."""

    symbol: str
    frequency: int = 0
    last_used: float = 0.0
    contexts: list[str] = Field(default_factory=list)


class UsageSnapshot(BaseModel):
    """On-disk form of a ``UsageLearner``."""

    stats: list[UsageStats] = Field(default_factory=list)
    history: list[str] = Field(default_factory=list)


class UsageLearner:
    """Tracks how often and how recently candidates were accepted.

    Counters only change through ``record``, which front ends call when the
    user accepts a candidate.
    """

    def __init__(
        self,
        history_size: int = 50,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._clock = clock
        self._stats: dict[str, UsageStats] = {}
        self._history: deque[str] = deque(maxlen=history_size)

    @property
    def history_size(self) -> int:
        return self._history.maxlen or 0

    def record(self, symbol: str, context: str | None = None) -> UsageStats:
        stats = self._stats.get(symbol)
        if stats is None:
            stats = UsageStats(symbol=symbol)
            self._stats[symbol] = stats
        stats.frequency += 1
        stats.last_used = self._clock()
        if context and context not in stats.contexts:
            stats.contexts.append(context)
        self._history.append(symbol)
        return stats

    def get(self, symbol: str) -> UsageStats | None:
        return self._stats.get(symbol)

    def recent(self, limit: int = 10) -> list[str]:
        """Most recently accepted labels, oldest first."""
        if limit <= 0:
            return []
        return list(self._history)[-limit:]

    def most_frequent(self, limit: int = 5) -> list[UsageStats]:
        return sorted(self._stats.values(), key=lambda s: -s.frequency)[:limit]

    def clear(self) -> None:
        self._stats.clear()
        self._history.clear()

    def __len__(self) -> int:
        return len(self._stats)

    def dump(self, path: Path) -> None:
        snapshot = UsageSnapshot(
            stats=list(self._stats.values()),
            history=list(self._history),
        )
        path.write_bytes(
            orjson.dumps(snapshot.model_dump(), option=orjson.OPT_INDENT_2)
        )

    @classmethod
    def load(
        cls,
        path: Path,
        history_size: int = 50,
        clock: Callable[[], float] = time.time,
    ) -> UsageLearner:
        """Restore a learner written by ``dump``.

        A missing file gives an empty learner; so does an unreadable or
        corrupt one, after a warning.
        """
        learner = cls(history_size=history_size, clock=clock)
        if not path.is_file():
            return learner

        try:
            snapshot = UsageSnapshot.model_validate(orjson.loads(path.read_bytes()))
        except (OSError, orjson.JSONDecodeError, ValidationError) as exc:
            logger.warning(f"Ignoring unreadable usage history {path}: {exc}")
            return learner

        for stats in snapshot.stats:
            learner._stats[stats.symbol] = stats
        learner._history.extend(snapshot.history)
        return learner


@dataclass(frozen=True)
class RankingContext:
    partial: str
    current_function: str | None
    learner: UsageLearner
    now: float


ScoringStrategy = Callable[["CompletionCandidate", RankingContext], int]


def score_partial_match(candidate: CompletionCandidate, ctx: RankingContext) -> int:
    label = candidate.label.lower()
    partial = ctx.partial.lower()
    if label.startswith(partial):
        return PREFIX_BONUS
    if partial in label:
        return SUBSTRING_BONUS
    return 0


def score_frequency(candidate: CompletionCandidate, ctx: RankingContext) -> int:
    stats = ctx.learner.get(candidate.label)
    if stats is None:
        return 0
    return min(stats.frequency * FREQUENCY_WEIGHT, FREQUENCY_CAP)


def score_recency(candidate: CompletionCandidate, ctx: RankingContext) -> int:
    stats = ctx.learner.get(candidate.label)
    if stats is None:
        return 0
    age = ctx.now - stats.last_used
    for max_age, bonus in RECENCY_BONUSES:
        if age < max_age:
            return bonus
    return 0


def score_enclosing_function(
    candidate: CompletionCandidate, ctx: RankingContext
) -> int:
    if ctx.current_function and ctx.current_function in candidate.detail:
        return ENCLOSING_FUNCTION_BONUS
    return 0


DEFAULT_STRATEGIES = (
    score_partial_match,
    score_frequency,
    score_recency,
    score_enclosing_function,
)


def build_sort_key(tier: int, score: int, label: str) -> str:
    """``<tier><ceiling - score, 4 digits>_<label>``; ascending = best first."""
    return f"{tier}{max(0, SCORE_CEILING - score):04d}_{label}"


class Ranker:
    """Scores candidates with a list of additive strategies and sorts them."""

    def __init__(
        self,
        learner: UsageLearner,
        strategies: Sequence[ScoringStrategy] = DEFAULT_STRATEGIES,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.learner = learner
        self.strategies = tuple(strategies)
        self._clock = clock

    def score(self, candidate: CompletionCandidate, ctx: RankingContext) -> int:
        return sum(strategy(candidate, ctx) for strategy in self.strategies)

    def rank(
        self,
        candidates: Iterable[CompletionCandidate],
        partial: str = "",
        current_function: str | None = None,
    ) -> list[CompletionCandidate]:
        ctx = RankingContext(
            partial=partial,
            current_function=current_function,
            learner=self.learner,
            now=self._clock(),
        )
        ranked = [
            candidate.model_copy(
                update={
                    "sort_key": build_sort_key(
                        candidate.tier, self.score(candidate, ctx), candidate.label
                    )
                }
            )
            for candidate in candidates
        ]
        ranked.sort(key=lambda c: c.sort_key)
        return ranked


__all__ = [
    "DEFAULT_STRATEGIES",
    "SCORE_CEILING",
    "Ranker",
    "RankingContext",
    "UsageLearner",
    "UsageSnapshot",
    "UsageStats",
    "build_sort_key",
    "score_enclosing_function",
    "score_frequency",
    "score_partial_match",
    "score_recency",
]
