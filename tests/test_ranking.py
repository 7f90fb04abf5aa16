from __future__ import annotations

from pathlib import Path

from completion.cache import CompletionCache, build_cache_key
from completion.ranking import (
    Ranker,
    RankingContext,
    UsageLearner,
    build_sort_key,
    score_enclosing_function,
    score_partial_match,
    score_recency,
)
from models.completion import TIER_SUGGESTED, CompletionCandidate


class _Clock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _candidate(label: str, **kwargs: object) -> CompletionCandidate:
    return CompletionCandidate(
        label=label,
        kind="function",
        insert_text=f"{label}($1)$0",
        **kwargs,  # type: ignore[arg-type]
    )


def test_more_frequent_candidate_ranks_first() -> None:
    clock = _Clock()
    learner = UsageLearner(clock=clock)
    learner.record("mind_mapping")
    learner.record("mind_mapping")
    learner.record("mind_mapping")
    learner.record("cornell_notes")
    clock.now += 7200

    ranked = Ranker(learner, clock=clock).rank(
        [_candidate("cornell_notes"), _candidate("mind_mapping")]
    )

    assert [c.label for c in ranked] == ["mind_mapping", "cornell_notes"]


def test_equal_frequency_prefers_recent_use() -> None:
    clock = _Clock(0.0)
    learner = UsageLearner(clock=clock)
    learner.record("older")
    clock.now = 90.0
    learner.record("newer")
    clock.now = 120.0

    # "older" was used 120s ago, "newer" 30s ago.
    ranked = Ranker(learner, clock=clock).rank([_candidate("older"), _candidate("newer")])

    assert [c.label for c in ranked] == ["newer", "older"]


def test_grounded_tier_always_precedes_suggestions() -> None:
    learner = UsageLearner()
    for _ in range(10):
        learner.record("catalog_name")

    ranked = Ranker(learner).rank(
        [
            _candidate("catalog_name", tier=TIER_SUGGESTED),
            _candidate("zzz_workspace"),
        ]
    )

    assert [c.label for c in ranked] == ["zzz_workspace", "catalog_name"]


def test_sort_key_format() -> None:
    assert build_sort_key(0, 100, "SQ3R") == "00900_SQ3R"
    assert build_sort_key(1, 0, "x") == "11000_x"
    assert build_sort_key(0, 5000, "x") == "00000_x"


def test_partial_match_and_enclosing_function_scores() -> None:
    ctx = RankingContext(
        partial="sq",
        current_function="study_plan",
        learner=UsageLearner(),
        now=0.0,
    )

    assert score_partial_match(_candidate("SQ3R"), ctx) == 100
    assert score_partial_match(_candidate("use_SQ3R"), ctx) == 50
    assert score_partial_match(_candidate("recall"), ctx) == 0
    assert score_enclosing_function(_candidate("x", detail="related to study_plan"), ctx) == 25
    assert score_enclosing_function(_candidate("x", detail="function"), ctx) == 0


def test_recency_bands() -> None:
    clock = _Clock(0.0)
    learner = UsageLearner(clock=clock)
    learner.record("used")

    def score_at(now: float) -> int:
        ctx = RankingContext(partial="", current_function=None, learner=learner, now=now)
        return score_recency(_candidate("used"), ctx)

    assert score_at(10.0) == 30
    assert score_at(200.0) == 20
    assert score_at(1000.0) == 10
    assert score_at(4000.0) == 0
    assert score_recency(
        _candidate("unused"),
        RankingContext(partial="", current_function=None, learner=learner, now=0.0),
    ) == 0


def test_history_is_bounded_fifo() -> None:
    learner = UsageLearner(history_size=3)
    for label in ["a", "b", "c", "d"]:
        learner.record(label, context="call")

    assert learner.recent() == ["b", "c", "d"]
    assert learner.recent(limit=1) == ["d"]
    stats = learner.get("a")
    assert stats is not None
    assert stats.contexts == ["call"]


def test_learner_dump_and_load(tmp_path: Path) -> None:
    clock = _Clock(50.0)
    learner = UsageLearner(clock=clock)
    learner.record("SQ3R", context="call")
    learner.record("SQ3R")
    path = tmp_path / "usage.json"

    learner.dump(path)
    restored = UsageLearner.load(path, clock=clock)

    stats = restored.get("SQ3R")
    assert stats is not None
    assert stats.frequency == 2
    assert stats.last_used == 50.0
    assert restored.recent() == ["SQ3R", "SQ3R"]


def test_load_missing_or_corrupt_file_gives_empty_learner(tmp_path: Path) -> None:
    missing = UsageLearner.load(tmp_path / "missing.json")
    assert len(missing) == 0

    corrupt_path = tmp_path / "usage.json"
    corrupt_path.write_text("{not json", encoding="utf-8")
    corrupt = UsageLearner.load(corrupt_path)
    assert len(corrupt) == 0

    wrong_shape = tmp_path / "shape.json"
    wrong_shape.write_text('{"stats": [{"frequency": "lots"}]}', encoding="utf-8")
    assert len(UsageLearner.load(wrong_shape)) == 0


def test_cache_expires_after_ttl() -> None:
    clock = _Clock(0.0)
    cache = CompletionCache(ttl_seconds=30.0, clock=clock)
    key = build_cache_key("a.ldl", 1, 4, "SQ3")
    cache.put(key, [_candidate("SQ3R")])

    clock.now = 29.0
    hit = cache.get(key)
    assert hit is not None
    assert [c.label for c in hit] == ["SQ3R"]

    clock.now = 31.0
    assert cache.get(key) is None
    assert key not in cache


def test_cache_sweeps_expired_entries_when_full() -> None:
    clock = _Clock(0.0)
    cache = CompletionCache(ttl_seconds=10.0, max_entries=2, clock=clock)
    cache.put("old-1", [])
    cache.put("old-2", [])

    clock.now = 20.0
    cache.put("new", [])

    assert len(cache) == 1
    assert "new" in cache


def test_cache_evicts_least_recently_used_live_entries() -> None:
    clock = _Clock(0.0)
    cache = CompletionCache(ttl_seconds=30.0, max_entries=2, clock=clock)
    cache.put("first", [])
    cache.put("second", [])
    assert cache.get("first") == []

    clock.now = 1.0
    cache.put("third", [])

    assert len(cache) == 2
    assert "second" not in cache
    assert "first" in cache
    assert "third" in cache


def test_cache_key_uses_line_tail() -> None:
    before = "x" * 30 + "SQ3"

    assert build_cache_key("a.ldl", 2, 34, before, tail=5) == "a.ldl:2:34:xxSQ3"
