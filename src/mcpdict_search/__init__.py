"""Query engine for a multi-reading Chinese character dictionary.

Look up characters by ideograph (with variant expansion) or by reading in
Middle Chinese, Mandarin, Cantonese, Korean, Vietnamese and Japanese.
"""

from mcpdict_search.domain.search import NO_QUERY, NoQuery, ResultRow, SearchMode, SearchOptions
from mcpdict_search.service_layer.search_service import QueryExplanation, SearchService


__version__ = "0.1.0"

__all__ = [
    "NO_QUERY",
    "NoQuery",
    "QueryExplanation",
    "ResultRow",
    "SearchMode",
    "SearchOptions",
    "SearchService",
    "__version__",
]
