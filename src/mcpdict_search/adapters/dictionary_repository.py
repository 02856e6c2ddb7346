"""Dictionary repository abstractions.

Defines the storage seam the result merger depends on, following the
Repository Pattern. The SQLite store lives in ``search.sqlite_storage``; the
in-memory repository here backs tests and small embedded dictionaries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Iterable

from mcpdict_search.domain.search import Column, Record


class DictionaryStoreError(RuntimeError):
    """The dictionary store is missing, corrupt or unreadable.

    Fatal to the current call; the engine has no way to repair store state, so
    it is never retried.
    """


class AbstractDictionaryRepository(ABC):
    """Read-only access to dictionary records by exact reading."""

    @abstractmethod
    def probe(self, column: Column, term: str) -> list[str]:
        """Return code forms of records whose ``column`` holds ``term``.

        Results are ordered by ascending code point.
        """
        raise NotImplementedError

    @abstractmethod
    def fetch(self, codes: Iterable[str]) -> dict[str, Record]:
        """Return the records for the given code forms, skipping unknown codes."""
        raise NotImplementedError

    def record_count(self) -> int:
        """Optional hook returning how many records the store holds."""

        return 0

    def close(self) -> None:
        """Optional hook releasing underlying resources."""

        return


def index_terms(record: Record, column: Column) -> list[str]:
    """Terms a record is reachable by in ``column``."""
    if column is Column.UNICODE:
        return [record.unicode]
    return record.readings(column)


class InMemoryDictionaryRepository(AbstractDictionaryRepository):
    """Dictionary held in plain dictionaries."""

    def __init__(self, records: Iterable[Record]) -> None:
        self._records: dict[str, Record] = {}
        self._postings: dict[tuple[Column, str], set[str]] = defaultdict(set)
        for record in records:
            self._records[record.unicode] = record
            for column in Column:
                for term in index_terms(record, column):
                    self._postings[(column, term)].add(record.unicode)

    def probe(self, column: Column, term: str) -> list[str]:
        codes = self._postings.get((column, term), set())
        return sorted(codes, key=lambda code: int(code, 16))

    def fetch(self, codes: Iterable[str]) -> dict[str, Record]:
        return {code: self._records[code] for code in codes if code in self._records}

    def record_count(self) -> int:
        return len(self._records)
