"""Domain layer - value objects for dictionary lookup with no infrastructure dependencies."""

from mcpdict_search.domain.search import (
    NO_QUERY,
    Column,
    Keyword,
    NoQuery,
    Record,
    ResultRow,
    SearchMode,
    SearchOptions,
    SearchOutcome,
)


__all__ = [
    "NO_QUERY",
    "Column",
    "Keyword",
    "NoQuery",
    "Record",
    "ResultRow",
    "SearchMode",
    "SearchOptions",
    "SearchOutcome",
]
