"""Search service orchestration layer.

Wires tokenizer, keyword expander, plan builder and result merger into the
single search entry point used by the CLI and by embedding applications.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from mcpdict_search.adapters.dictionary_repository import AbstractDictionaryRepository, DictionaryStoreError
from mcpdict_search.domain.search import NO_QUERY, Keyword, NoQuery, SearchMode, SearchOptions, SearchOutcome
from mcpdict_search.observability.context import bind_search_context
from mcpdict_search.observability.metrics import (
    KEYWORD_COUNT,
    SEARCH_COUNT,
    SEARCH_ERRORS,
    SEARCH_LATENCY,
    track_latency,
)
from mcpdict_search.observability.tracing import create_span
from mcpdict_search.orthography import DefaultScriptRules
from mcpdict_search.orthography.base import ScriptRules
from mcpdict_search.search.expander import KeywordExpander
from mcpdict_search.search.merger import ResultMerger
from mcpdict_search.search.plan import LookupPlan, build_plan
from mcpdict_search.search.tokenizer import RawToken, tokenize


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryExplanation:
    """What a search would probe, computed without touching the store."""

    mode: SearchMode
    tokens: tuple[RawToken, ...]
    keywords: tuple[Keyword, ...]
    plan: LookupPlan

    @property
    def is_no_query(self) -> bool:
        return not self.keywords


def explain_query(
    text: str,
    mode: SearchMode | str,
    options: SearchOptions | None = None,
    rules: ScriptRules | None = None,
) -> QueryExplanation:
    """Tokenize, expand and plan ``text``; no store is involved."""
    search_mode = SearchMode.parse(mode)
    settings = options or SearchOptions()
    active_rules = rules or DefaultScriptRules()
    tokens = tokenize(text, search_mode, active_rules)
    keywords = KeywordExpander(active_rules).expand(tokens, search_mode, settings)
    return QueryExplanation(
        mode=search_mode,
        tokens=tuple(tokens),
        keywords=tuple(keywords),
        plan=build_plan(keywords, search_mode),
    )


class SearchService:
    """High-level search orchestration service.

    The service is stateless apart from its collaborators; every call receives
    its own options snapshot, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        repository: AbstractDictionaryRepository,
        rules: ScriptRules | None = None,
    ) -> None:
        """Initialize search service with dependencies.

        Args:
            repository: Dictionary store to probe (required)
            rules: Script rules provider; the bundled default tables when omitted
        """
        self.repository = repository
        self.rules = rules or DefaultScriptRules()
        self.merger = ResultMerger(repository)

    def explain(
        self,
        text: str,
        mode: SearchMode | str,
        options: SearchOptions | None = None,
    ) -> QueryExplanation:
        """Interpret ``text`` and build its lookup plan without running it."""
        return explain_query(text, mode, options, self.rules)

    def search(
        self,
        text: str,
        mode: SearchMode | str,
        options: SearchOptions | None = None,
    ) -> SearchOutcome:
        """Run a search.

        Args:
            text: Free-form user input
            mode: Search mode or its short code (``"hz"``, ``"pu"``...)
            options: Settings snapshot for this call; defaults when omitted

        Returns:
            Result rows ordered by rank then code point, or ``NO_QUERY`` when
            no token survived canonicalization

        Raises:
            DictionaryStoreError: The store could not be read; never retried
            ValueError: ``mode`` is not a known search mode
        """
        search_mode = SearchMode.parse(mode)
        settings = options or SearchOptions()

        with (
            bind_search_context(mode=search_mode.value),
            create_span(
                "mcpdict.search",
                attributes={"search.mode": search_mode.value, "search.input_length": len(text)},
            ) as span,
            track_latency(SEARCH_LATENCY, mode=search_mode.value),
        ):
            explanation = self.explain(text, search_mode, settings)
            KEYWORD_COUNT.labels(mode=search_mode.value).observe(len(explanation.keywords))
            span.set_attribute("search.token_count", len(explanation.tokens))
            span.set_attribute("search.keyword_count", len(explanation.keywords))
            logger.debug(
                "Search analyzed: %d tokens, %d keywords, %d probes",
                len(explanation.tokens),
                len(explanation.keywords),
                len(explanation.plan),
            )

            if explanation.is_no_query:
                SEARCH_COUNT.labels(mode=search_mode.value, outcome="no_query").inc()
                return NO_QUERY

            try:
                outcome = self.merger.execute(explanation.plan, settings)
            except DictionaryStoreError as exc:
                SEARCH_ERRORS.labels(mode=search_mode.value, error_type=type(exc).__name__).inc()
                logger.error("Search aborted by store failure: %s", exc)
                raise

            if isinstance(outcome, NoQuery):
                SEARCH_COUNT.labels(mode=search_mode.value, outcome="no_query").inc()
                return outcome

            span.set_attribute("search.result_count", len(outcome))
            SEARCH_COUNT.labels(mode=search_mode.value, outcome="hit" if outcome else "miss").inc()
            logger.debug("Search completed: %d results", len(outcome))
            return outcome
