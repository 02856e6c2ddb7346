"""Adapters layer - Repository implementations.

Following Cosmic Python Chapter 2: Repository Pattern
Abstracts dictionary storage behind exact-reading probes.
"""

from .dictionary_repository import (
    AbstractDictionaryRepository,
    DictionaryStoreError,
    InMemoryDictionaryRepository,
    index_terms,
)


__all__ = [
    "AbstractDictionaryRepository",
    "DictionaryStoreError",
    "InMemoryDictionaryRepository",
    "index_terms",
]
