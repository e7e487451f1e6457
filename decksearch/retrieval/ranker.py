"""
Local ranker: free-text fuzzy search composed with categorical filters.

Example:
    >>> ranker = LocalRanker(slides)
    >>> result = ranker.search("demo", FilterSelection(category="Pricing"))
    >>> result.suggestions
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..config import Settings, settings as default_settings
from ..data_models import EnrichedSlide, SearchHit
from .filters import FilterSelection, apply_filters
from .fuzzy import DEFAULT_KEYS, FuzzyConfig, FuzzyIndex, SearchKey

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


@dataclass(frozen=True)
class RankerConfig:
    """Result sizing for the local ranker."""

    # Hits kept for a non-empty query, after filtering
    search_limit: int = 50

    # Unscored slides shown for an empty query
    browse_limit: int = 10

    suggestion_limit: int = 5
    suggestion_length: int = 60

    @classmethod
    def from_settings(cls, config: Settings) -> "RankerConfig":
        return cls(
            search_limit=config.search_limit,
            browse_limit=config.browse_limit,
            suggestion_limit=config.suggestion_limit,
            suggestion_length=config.suggestion_length,
        )


@dataclass
class LocalSearchResult:
    query: str
    filters: FilterSelection
    hits: List[SearchHit] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    @property
    def slides(self) -> List[EnrichedSlide]:
        return [h.slide for h in self.hits]


def build_suggestions(hits: Sequence[SearchHit], limit: int = 5, length: int = 60) -> List[str]:
    """First matched field value of the top hits, truncated, de-duplicated in order."""
    suggestions: List[str] = []
    for hit in hits[:limit]:
        if not hit.matches:
            continue
        suggestion = hit.matches[0].value[:length] + ELLIPSIS
        if suggestion not in suggestions:
            suggestions.append(suggestion)
    return suggestions


def clean_suggestion(suggestion: str) -> str:
    """Turn a picked suggestion back into a query."""
    return suggestion.replace(ELLIPSIS, "", 1)


class LocalRanker:
    """
    In-process search over a fixed enriched-slide set.

    The fuzzy index is built once here from the slides it is given; the
    ranker is immutable, so a changed slide set means a new ranker.
    """

    def __init__(
        self,
        slides: Sequence[EnrichedSlide],
        index: Optional[FuzzyIndex] = None,
        config: Optional[RankerConfig] = None,
        keys: Sequence[SearchKey] = DEFAULT_KEYS,
        fuzzy_config: Optional[FuzzyConfig] = None,
    ):
        self.slides: Tuple[EnrichedSlide, ...] = tuple(slides)
        self.config = config or RankerConfig()
        self.index = index if index is not None else FuzzyIndex(self.slides, keys=keys, config=fuzzy_config)

    @classmethod
    def from_settings(cls, slides: Sequence[EnrichedSlide], config: Optional[Settings] = None) -> "LocalRanker":
        config = config or default_settings
        fuzzy_config = FuzzyConfig(
            threshold=config.search_threshold,
            min_match_char_length=config.min_match_char_length,
        )
        return cls(slides, config=RankerConfig.from_settings(config), fuzzy_config=fuzzy_config)

    def search(self, query: str = "", filters: Optional[FilterSelection] = None) -> LocalSearchResult:
        """
        Filter, and when ``query`` is non-blank, fuzzy-rank the slide set.

        A blank query returns the first ``browse_limit`` filtered slides,
        unscored and in load order, with no suggestions.
        """
        filters = filters or FilterSelection()

        if not query.strip():
            filtered = apply_filters(self.slides, filters)
            hits = [SearchHit(slide=s) for s in filtered[: self.config.browse_limit]]
            return LocalSearchResult(query=query, filters=filters, hits=hits)

        hits = apply_filters(self.index.search(query), filters)[: self.config.search_limit]
        suggestions = build_suggestions(
            hits,
            limit=self.config.suggestion_limit,
            length=self.config.suggestion_length,
        )
        logger.debug(f"Local search '{query}' returned {len(hits)} hits")
        return LocalSearchResult(query=query, filters=filters, hits=hits, suggestions=suggestions)
