"""Short-lived memo of completion results."""

from __future__ import annotations

import time
from collections import OrderedDict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from models.completion import CompletionCandidate


def build_cache_key(identity: str, line: int, col: int, before: str, tail: int = 20) -> str:
    """Key on document, cursor and the last ``tail`` characters before it."""
    return f"{identity}:{line}:{col}:{before[-tail:]}"


class CompletionCache:
    """TTL + LRU cache of ranked candidate lists.

    Expired entries are dropped when looked up. Once the cache grows past
    ``max_entries`` expired entries are swept, then the least recently used
    live entries are evicted until it fits again.
    """

    def __init__(
        self,
        ttl_seconds: float = 30.0,
        max_entries: int = 100,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, list[CompletionCandidate]]] = (
            OrderedDict()
        )

    def get(self, key: str) -> list[CompletionCandidate] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, candidates = entry
        if self._clock() - stored_at < self.ttl_seconds:
            self._entries.move_to_end(key)
            return list(candidates)
        del self._entries[key]
        return None

    def put(self, key: str, candidates: list[CompletionCandidate]) -> None:
        self._entries[key] = (self._clock(), list(candidates))
        self._entries.move_to_end(key)
        if len(self._entries) > self.max_entries:
            self.sweep()
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def sweep(self) -> int:
        """Drop expired entries; return how many were removed."""
        now = self._clock()
        expired = [
            key
            for key, (stored_at, _) in self._entries.items()
            if now - stored_at > self.ttl_seconds
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


__all__ = ["CompletionCache", "build_cache_key"]
