"""Lookup plan construction.

A plan is the cross product of keywords and the columns a mode searches,
ordered by keyword rank first and column declaration order second.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from mcpdict_search.domain.search import Column, Keyword, SearchMode


JAPANESE_COLUMNS: tuple[Column, ...] = (
    Column.JAPANESE_GO,
    Column.JAPANESE_KAN,
    Column.JAPANESE_TOU,
    Column.JAPANESE_KWAN,
    Column.JAPANESE_OTHER,
)

_COLUMNS_BY_MODE: dict[SearchMode, tuple[Column, ...]] = {
    SearchMode.IDEOGRAPH: (Column.UNICODE,),
    SearchMode.MIDDLE_CHINESE: (Column.MIDDLE_CHINESE,),
    SearchMode.MANDARIN: (Column.MANDARIN,),
    SearchMode.CANTONESE: (Column.CANTONESE,),
    SearchMode.KOREAN: (Column.KOREAN,),
    SearchMode.VIETNAMESE: (Column.VIETNAMESE,),
    SearchMode.JAPANESE_GO: (Column.JAPANESE_GO,),
    SearchMode.JAPANESE_KAN: (Column.JAPANESE_KAN,),
    SearchMode.JAPANESE_ANY: JAPANESE_COLUMNS,
}


def columns_for_mode(mode: SearchMode) -> tuple[Column, ...]:
    """Return the column set probed for ``mode``."""
    return _COLUMNS_BY_MODE[mode]


@dataclass(frozen=True, slots=True)
class PlanEntry:
    """One exact-match probe of a column against a keyword."""

    keyword: Keyword
    column: Column

    @property
    def rank(self) -> int:
        return self.keyword.rank

    @property
    def term(self) -> str:
        return self.keyword.text


@dataclass(frozen=True, slots=True)
class LookupPlan:
    """Ordered probes for one search call."""

    entries: tuple[PlanEntry, ...] = ()

    def __iter__(self) -> Iterator[PlanEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries


def build_plan(keywords: Sequence[Keyword], mode: SearchMode) -> LookupPlan:
    """Build ``len(keywords) * len(columns)`` probes in rank order."""
    columns = columns_for_mode(mode)
    ordered = sorted(keywords, key=lambda keyword: keyword.rank)
    entries = tuple(PlanEntry(keyword=keyword, column=column) for keyword in ordered for column in columns)
    return LookupPlan(entries=entries)
