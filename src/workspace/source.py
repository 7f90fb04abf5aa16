"""Document sources feeding the workspace index.

A source enumerates document identities and hands out their modification
time and current text. Retrieval is asynchronous; everything downstream of
it (parsing, caching) is synchronous.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Protocol

from scan.files import find_ldl_files

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import LdlMapConfig


class DocumentSource(Protocol):
    async def list_documents(self) -> list[str]: ...

    async def stat(self, identity: str) -> float: ...

    async def read(self, identity: str) -> str: ...


class FileSystemSource:
    """Serves ``.ldl`` files under a workspace root, keyed by relative POSIX path."""

    def __init__(self, root: Path, config: LdlMapConfig | None = None) -> None:
        self.root = root
        self.config = config

    def _discover(self) -> list[str]:
        kwargs = {}
        if self.config is not None:
            kwargs = {
                "extensions": self.config.extensions,
                "include_patterns": self.config.include,
                "exclude_patterns": self.config.exclude,
                "nested_gitignore": self.config.nested_gitignore,
            }
        return [
            path.relative_to(self.root).as_posix()
            for path in find_ldl_files(self.root, **kwargs)
        ]

    async def list_documents(self) -> list[str]:
        return await asyncio.to_thread(self._discover)

    async def stat(self, identity: str) -> float:
        path = self.root / identity
        stat_result = await asyncio.to_thread(path.stat)
        return stat_result.st_mtime

    async def read(self, identity: str) -> str:
        path = self.root / identity
        return await asyncio.to_thread(path.read_text, encoding="utf-8")


class InMemorySource:
    """Documents held in memory, e.g. unsaved editor buffers.

    Every ``put`` advances the document's modification time unless one is
    given explicitly.
    """

    def __init__(self) -> None:
        self._documents: dict[str, tuple[str, float]] = {}

    def put(self, identity: str, text: str, mtime: float | None = None) -> None:
        if mtime is None:
            previous = self._documents.get(identity)
            mtime = time.time()
            if previous is not None and mtime <= previous[1]:
                mtime = previous[1] + 1e-6
        self._documents[identity] = (text, mtime)

    def remove(self, identity: str) -> None:
        self._documents.pop(identity, None)

    def _get(self, identity: str) -> tuple[str, float]:
        try:
            return self._documents[identity]
        except KeyError:
            msg = f"No such document: {identity}"
            raise FileNotFoundError(msg) from None

    async def list_documents(self) -> list[str]:
        return sorted(self._documents)

    async def stat(self, identity: str) -> float:
        return self._get(identity)[1]

    async def read(self, identity: str) -> str:
        return self._get(identity)[0]


__all__ = ["DocumentSource", "FileSystemSource", "InMemorySource"]
