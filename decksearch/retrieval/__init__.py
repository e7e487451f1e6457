"""
Retrieval module for local slide search.

- FuzzyIndex: weighted multi-field fuzzy matching
- FilterSelection: one record holding every categorical filter
- LocalRanker: fuzzy search composed with filters, plus suggestions

Example usage:
    >>> from decksearch.retrieval import LocalRanker, FilterSelection
    >>> ranker = LocalRanker(slides)
    >>> result = ranker.search("seo results", FilterSelection(deck="Global Case Studies"))
"""

from .filters import FilterSelection, apply_filters, build_facets, narrow_options
from .fuzzy import DEFAULT_KEYS, FuzzyConfig, FuzzyIndex, SearchKey
from .ranker import LocalRanker, LocalSearchResult, RankerConfig, build_suggestions, clean_suggestion

__all__ = [
    "FilterSelection",
    "apply_filters",
    "build_facets",
    "narrow_options",
    "DEFAULT_KEYS",
    "FuzzyConfig",
    "FuzzyIndex",
    "SearchKey",
    "LocalRanker",
    "LocalSearchResult",
    "RankerConfig",
    "build_suggestions",
    "clean_suggestion",
]
