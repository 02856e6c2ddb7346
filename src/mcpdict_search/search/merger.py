"""Execute a lookup plan and merge its hits into ranked result rows."""

from __future__ import annotations

from collections.abc import Iterable
import logging

from mcpdict_search.adapters.dictionary_repository import AbstractDictionaryRepository
from mcpdict_search.domain.search import NO_QUERY, ResultRow, SearchOptions, SearchOutcome
from mcpdict_search.search.plan import LookupPlan


logger = logging.getLogger(__name__)


def merge_hits(hits: Iterable[tuple[str, int]]) -> dict[str, int]:
    """Collapse ``(code, rank)`` hits to the best rank per code.

    Hits arrive in rank order from a plan, so the first rank seen for a code is
    already its minimum; the comparison keeps the result correct for unordered
    input too.
    """
    best: dict[str, int] = {}
    for code, rank in hits:
        current = best.get(code)
        if current is None or rank < current:
            best[code] = rank
    return best


class ResultMerger:
    """Runs every probe of a plan and deduplicates the matches."""

    def __init__(self, repository: AbstractDictionaryRepository) -> None:
        self.repository = repository

    def _hits(self, plan: LookupPlan) -> Iterable[tuple[str, int]]:
        for entry in plan:
            for code in self.repository.probe(entry.column, entry.term):
                yield code, entry.rank

    def execute(self, plan: LookupPlan, options: SearchOptions) -> SearchOutcome:
        """Return rows ordered by rank, then by code point.

        An empty plan returns ``NO_QUERY`` rather than an empty list.
        """
        if plan.is_empty:
            return NO_QUERY

        best = merge_hits(self._hits(plan))
        records = self.repository.fetch(best)
        rows = [ResultRow(record=records[code], rank=rank) for code, rank in best.items() if code in records]
        missing = len(best) - len(rows)
        if missing:
            logger.warning("%d matched entries have no record row; the store may be inconsistent", missing)

        if options.restrict_to_middle_chinese:
            rows = [row for row in rows if row.record.mc]

        rows.sort(key=lambda row: (row.rank, row.record.codepoint))
        return rows
