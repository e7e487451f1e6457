"""
Weighted multi-field fuzzy index.

Each slide is matched against several of its fields; every field that
matches within the error threshold contributes ``field_score ** weight``
to a product, so a slide matching strongly in a heavy field ranks first.

Scores are in [0, 1] with 0 a perfect match. A field's score is
``1 - similarity / 100`` where similarity is rapidfuzz's edit-distance
ratio of the query against the best-aligned substring of the field
(or the whole field, when the field is shorter than the query).

Example:
    >>> index = FuzzyIndex(slides)
    >>> hits = index.search("pricng")      # tolerates the typo
    >>> [h.slide.identity for h in hits[:3]]
"""

import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from rapidfuzz import fuzz

from ..data_models import EnrichedSlide, FieldMatch, SearchHit

logger = logging.getLogger(__name__)

# A perfect match in a weighted field would zero the whole product
_EPSILON = sys.float_info.epsilon


def fold_case(value: str) -> str:
    """Lower-case ``value`` without changing its length, so spans index the original."""
    return "".join(c if len(c.lower()) != 1 else c.lower() for c in value)


@dataclass(frozen=True)
class SearchKey:
    """A slide field taking part in fuzzy matching."""
    name: str
    attribute: str
    weight: float


DEFAULT_KEYS: Tuple[SearchKey, ...] = (
    SearchKey("enrichedText", "enriched_text", 0.5),
    SearchKey("text", "text", 0.3),
    SearchKey("client", "client", 0.2),
    SearchKey("industry", "industry", 0.15),
    SearchKey("category", "category", 0.1),
    SearchKey("indexService", "index_service", 0.1),
    SearchKey("businessType", "business_type", 0.1),
    SearchKey("office", "office", 0.05),
    SearchKey("deckDisplayName", "deck_display_name", 0.05),
    SearchKey("notes", "notes", 0.05),
)


@dataclass(frozen=True)
class FuzzyConfig:
    """Matching constants."""

    # Worst per-field score still counted as a match
    threshold: float = 0.4

    # Matched fragments shorter than this are ignored
    min_match_char_length: int = 2

    # Maximum hits returned by search(); None for no limit
    limit: Optional[int] = None


@dataclass(frozen=True)
class _Entry:
    slide: EnrichedSlide
    fields: Tuple[Tuple[SearchKey, str, str], ...]


class FuzzyIndex:
    """
    Immutable fuzzy index over a fixed slide sequence.

    The index never changes after construction; a new slide set means a
    new index, which callers swap in whole.
    """

    def __init__(
        self,
        slides: Sequence[EnrichedSlide],
        keys: Sequence[SearchKey] = DEFAULT_KEYS,
        config: Optional[FuzzyConfig] = None,
    ):
        self.config = config or FuzzyConfig()
        total_weight = sum(k.weight for k in keys) or 1.0
        self.keys: Tuple[SearchKey, ...] = tuple(
            SearchKey(k.name, k.attribute, k.weight / total_weight) for k in keys
        )
        self._entries: Tuple[_Entry, ...] = tuple(self._build_entry(s) for s in slides)

    def __len__(self) -> int:
        return len(self._entries)

    def _build_entry(self, slide: EnrichedSlide) -> _Entry:
        fields = []
        for key in self.keys:
            value = getattr(slide, key.attribute, None)
            if isinstance(value, str) and value:
                fields.append((key, value, fold_case(value)))
        return _Entry(slide=slide, fields=tuple(fields))

    def _score_field(self, pattern: str, lowered: str) -> Optional[Tuple[float, Tuple[int, int]]]:
        cutoff = (1.0 - self.config.threshold) * 100
        if len(lowered) >= len(pattern):
            alignment = fuzz.partial_ratio_alignment(pattern, lowered, score_cutoff=cutoff)
            if alignment is None:
                return None
            similarity = alignment.score
            span = (alignment.dest_start, alignment.dest_end)
        else:
            similarity = fuzz.ratio(pattern, lowered, score_cutoff=cutoff)
            if not similarity:
                return None
            span = (0, len(lowered))

        if span[1] - span[0] < self.config.min_match_char_length:
            return None
        return 1.0 - similarity / 100.0, span

    def search(self, query: str, limit: Optional[int] = None) -> List[SearchHit]:
        """Return matching slides, best (lowest score) first, ties in load order."""
        pattern = fold_case(query.strip())
        if len(pattern) < self.config.min_match_char_length:
            return []

        scored: List[Tuple[float, int, EnrichedSlide, List[FieldMatch]]] = []
        for position, entry in enumerate(self._entries):
            total = 1.0
            matches: List[FieldMatch] = []
            for key, value, lowered in entry.fields:
                result = self._score_field(pattern, lowered)
                if result is None:
                    continue
                field_score, span = result
                total *= (field_score or _EPSILON) ** key.weight
                matches.append(FieldMatch(key=key.name, value=value, indices=[span]))
            if matches:
                scored.append((min(max(total, 0.0), 1.0), position, entry.slide, matches))

        scored.sort(key=lambda item: (item[0], item[1]))
        limit = limit if limit is not None else self.config.limit
        if limit is not None:
            scored = scored[:limit]

        logger.debug(f"Fuzzy search '{query}' matched {len(scored)} of {len(self._entries)} slides")
        return [SearchHit(slide=slide, score=score, matches=matches) for score, _, slide, matches in scored]
