"""Service layer - Search orchestration.

Following Cosmic Python Chapter 4:
- Service layer orchestrates use cases
- Works with domain model and repositories
"""

from .search_service import QueryExplanation, SearchService, explain_query


__all__ = [
    "QueryExplanation",
    "SearchService",
    "explain_query",
]
