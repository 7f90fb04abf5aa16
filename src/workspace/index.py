"""Staleness-aware, multi-document symbol index."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from models.symbols import LocatedSymbol
from parse.symbols import parse_document

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Collection

    from models.symbols import Symbol
    from parse.symbol_table import SymbolTable
    from workspace.source import DocumentSource


class CancellationToken:
    """Cooperative cancellation flag, checked once per document by long scans."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled


@dataclass(frozen=True)
class IndexEntry:
    """One document's parsed table, tagged with the mtime it was built from."""

    identity: str
    mtime: float
    table: SymbolTable


class WorkspaceIndex:
    """Maps document identity to its most recently parsed symbol table.

    Entries are replaced wholesale on re-parse, never mutated. The index owns
    derived tables only; document text always comes from the source.
    """

    def __init__(
        self,
        source: DocumentSource,
        parser: Callable[[str], SymbolTable] = parse_document,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._source = source
        self._parser = parser
        self._clock = clock
        self._entries: dict[str, IndexEntry] = {}

    @property
    def source(self) -> DocumentSource:
        return self._source

    def _store(self, identity: str, mtime: float, text: str) -> SymbolTable:
        table = self._parser(text)
        self._entries[identity] = IndexEntry(identity=identity, mtime=mtime, table=table)
        logger.debug(f"Parsed {identity}: {len(table)} symbols")
        return table

    async def get_index_for(self, identity: str) -> SymbolTable:
        """Return the table for ``identity``, re-parsing if its mtime advanced.

        Raises:
            OSError: If the source cannot stat or read the document.
        """
        mtime = await self._source.stat(identity)
        cached = self._entries.get(identity)
        if cached is not None and cached.mtime >= mtime:
            return cached.table

        text = await self._source.read(identity)
        return self._store(identity, mtime, text)

    def update(
        self, identity: str, text: str, mtime: float | None = None
    ) -> SymbolTable:
        """Index text the caller already holds (an open editor buffer).

        Without an explicit ``mtime`` the text is always re-parsed and stamped
        with the current time.
        """
        if mtime is None:
            return self._store(identity, self._clock(), text)
        cached = self._entries.get(identity)
        if cached is not None and cached.mtime >= mtime:
            return cached.table
        return self._store(identity, mtime, text)

    def cached(self, identity: str) -> SymbolTable | None:
        entry = self._entries.get(identity)
        return entry.table if entry is not None else None

    def invalidate(self, identity: str) -> None:
        self._entries.pop(identity, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identity: object) -> bool:
        return identity in self._entries

    async def iter_tables(
        self,
        cancel: CancellationToken | None = None,
        exclude: Collection[str] = (),
    ) -> AsyncIterator[tuple[str, SymbolTable]]:
        """Yield ``(identity, table)`` for every document the source lists.

        Unreadable documents are logged and skipped. Cancellation stops the
        scan between documents; what was yielded so far stands.
        """
        try:
            documents = await self._source.list_documents()
        except OSError as exc:
            logger.warning(f"Could not enumerate workspace documents: {exc}")
            return

        logger.info(f"Scanning {len(documents)} workspace documents")
        for identity in documents:
            if cancel is not None and cancel.is_cancelled:
                logger.debug(f"Workspace scan cancelled before {identity}")
                return
            if identity in exclude:
                continue
            try:
                table = await self.get_index_for(identity)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning(f"Skipping {identity}: {exc}")
                continue
            yield identity, table

    async def iter_documents(
        self,
        cancel: CancellationToken | None = None,
        exclude: Collection[str] = (),
    ) -> AsyncIterator[tuple[str, str]]:
        """Yield ``(identity, text)`` for every readable document.

        The read text also refreshes the document's table when its mtime has
        advanced. Same skip and cancellation rules as ``iter_tables``.
        """
        try:
            documents = await self._source.list_documents()
        except OSError as exc:
            logger.warning(f"Could not enumerate workspace documents: {exc}")
            return

        for identity in documents:
            if cancel is not None and cancel.is_cancelled:
                logger.debug(f"Workspace scan cancelled before {identity}")
                return
            if identity in exclude:
                continue
            try:
                mtime = await self._source.stat(identity)
                text = await self._source.read(identity)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning(f"Skipping {identity}: {exc}")
                continue
            self.update(identity, text, mtime)
            yield identity, text

    async def aggregate(
        self,
        predicate: Callable[[Symbol], bool] | None = None,
        cancel: CancellationToken | None = None,
        exclude: Collection[str] = (),
    ) -> list[LocatedSymbol]:
        """Collect symbols satisfying ``predicate`` across the workspace."""
        results: list[LocatedSymbol] = []
        async for identity, table in self.iter_tables(cancel=cancel, exclude=exclude):
            for symbol in table.all_symbols():
                if predicate is None or predicate(symbol):
                    results.append(LocatedSymbol(path=identity, symbol=symbol))
        return results

    async def all_symbols(
        self, cancel: CancellationToken | None = None
    ) -> list[LocatedSymbol]:
        return await self.aggregate(cancel=cancel)

    async def all_labels(self, cancel: CancellationToken | None = None) -> list[str]:
        labels: set[str] = set()
        async for _, table in self.iter_tables(cancel=cancel):
            labels.update(table.all_labels())
        return sorted(labels)

    async def symbols_by_label(
        self, label: str, cancel: CancellationToken | None = None
    ) -> list[LocatedSymbol]:
        return await self.aggregate(lambda symbol: label in symbol.labels, cancel=cancel)


__all__ = ["CancellationToken", "IndexEntry", "WorkspaceIndex"]
