"""In-memory symbol table for one parsed LDL document."""

from __future__ import annotations

from typing import TYPE_CHECKING

from models.symbols import owner_of, version_of

if TYPE_CHECKING:
    from collections.abc import Iterator

    from models.symbols import Symbol

SymbolsIndex = dict[str, list["Symbol"]]
LabelIndex = dict[str, list["Symbol"]]


class SymbolTable:
    """Symbols grouped by name, plus a label -> symbols index.

    Both indexes preserve insertion order: the buckets list symbols in the
    order the parser first encountered them.
    """

    def __init__(self) -> None:
        self._symbols: SymbolsIndex = {}
        self._labels: LabelIndex = {}

    def add(self, symbol: Symbol) -> None:
        self._symbols.setdefault(symbol.name, []).append(symbol)
        for label in symbol.labels:
            self._labels.setdefault(label, []).append(symbol)

    def find_all(
        self,
        name: str,
        version: str | None = None,
        owner: str | None = None,
    ) -> list[Symbol]:
        """Return every declaration of ``name`` matching the disambiguators.

        Methods of ``owner`` take precedence when there are any; otherwise
        the whole bucket is filtered by ``version`` when one is given.
        """
        bucket = self._symbols.get(name)
        if not bucket:
            return []

        if owner:
            owned = [s for s in bucket if owner_of(s) == owner]
            if owned:
                if version:
                    return [s for s in owned if version_of(s) == version]
                return owned

        if version:
            return [s for s in bucket if version_of(s) == version]

        return list(bucket)

    def find(
        self,
        name: str,
        version: str | None = None,
        owner: str | None = None,
    ) -> Symbol | None:
        matches = self.find_all(name, version=version, owner=owner)
        return matches[0] if matches else None

    def symbols_by_label(self, label: str) -> list[Symbol]:
        return list(self._labels.get(label, []))

    def all_labels(self) -> list[str]:
        return sorted(self._labels)

    def label_index(self) -> LabelIndex:
        """Copy of the label index, in first-seen label order."""
        return {label: list(symbols) for label, symbols in self._labels.items()}

    def all_symbols(self) -> list[Symbol]:
        return [symbol for bucket in self._symbols.values() for symbol in bucket]

    def names(self) -> list[str]:
        return list(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self.all_symbols())

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._symbols.values())

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SymbolTable):
            return NotImplemented
        return self._symbols == other._symbols and self._labels == other._labels

    __hash__ = None  # type: ignore[assignment]


__all__ = ["LabelIndex", "SymbolTable", "SymbolsIndex"]
