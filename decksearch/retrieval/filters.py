"""
Categorical filters and facets.

All seven filter dimensions live in one ``FilterSelection`` record; each is
either ``"All"`` (no constraint) or a single selected value, and active
dimensions combine as an AND.
"""

from collections import Counter
from typing import Dict, Iterable, List, Sequence, Tuple

from pydantic import BaseModel, Field

from ..data_models import ALL, EnrichedSlide


class FilterSelection(BaseModel):
    deck: str = ALL
    category: str = ALL
    service: str = ALL
    office: str = ALL
    client: str = ALL
    business_type: str = Field(default=ALL, alias="businessType")
    industry: str = ALL

    class Config:
        frozen = True
        populate_by_name = True

    @classmethod
    def cleared(cls) -> "FilterSelection":
        return cls()

    @property
    def is_active(self) -> bool:
        return any(value != ALL for value in self.model_dump().values())

    def with_value(self, dimension: str, value: str) -> "FilterSelection":
        """Copy with one dimension changed. ``dimension`` may be a field name or alias."""
        name = _DIMENSION_NAMES.get(dimension, dimension)
        if name not in type(self).model_fields:
            raise ValueError(f"Unknown filter dimension: {dimension}")
        return self.model_copy(update={name: value or ALL})

    def matches(self, slide: EnrichedSlide) -> bool:
        if self.category != ALL and slide.category != self.category:
            return False
        if self.deck != ALL and slide.deck_display_name != self.deck:
            return False
        if self.service != ALL and self.service not in slide.services:
            return False
        if self.office != ALL and slide.office != self.office:
            return False
        if self.client != ALL and slide.client != self.client:
            return False
        if self.business_type != ALL and slide.business_type != self.business_type:
            return False
        if self.industry != ALL and not _industry_matches(slide, self.industry):
            return False
        return True


_DIMENSION_NAMES = {"businessType": "business_type", "business-type": "business_type"}


def _industry_matches(slide: EnrichedSlide, industry: str) -> bool:
    return bool(slide.industry) and industry.lower() in slide.industry.lower()


def apply_filters(slides: Iterable, selection: FilterSelection) -> List:
    """
    Keep the items passing every active filter, preserving order.

    Items may be slides or search hits (anything with a ``.slide``).
    """
    if not selection.is_active:
        return list(slides)
    return [s for s in slides if selection.matches(getattr(s, "slide", s))]


def narrow_options(values: Sequence[str], search: str) -> List[str]:
    """Facet values containing ``search``, case-insensitively."""
    if not search:
        return list(values)
    needle = search.lower()
    return [v for v in values if needle in v.lower()]


def _sorted_counts(counter: Counter) -> List[Tuple[str, int]]:
    return sorted(counter.items(), key=lambda item: item[0])


def build_facets(slides: Sequence[EnrichedSlide]) -> Dict[str, List[Tuple[str, int]]]:
    """
    Distinct values and slide counts per filter dimension.

    ``deck`` and ``category`` are always present; the index-backed and
    service dimensions appear only when some slide carries a value.
    """
    decks = Counter(s.deck_display_name for s in slides)
    categories = Counter(s.category for s in slides)
    offices = Counter(s.office for s in slides if s.office)
    clients = Counter(s.client for s in slides if s.client)
    business_types = Counter(s.business_type for s in slides if s.business_type)
    services = Counter(service for s in slides for service in set(s.services))

    industry_values = sorted({i for s in slides for i in s.industries})
    industries = Counter({
        value: sum(1 for s in slides if _industry_matches(s, value))
        for value in industry_values
    })

    facets: Dict[str, List[Tuple[str, int]]] = {
        "deck": _sorted_counts(decks),
        "category": _sorted_counts(categories),
    }
    optional = {
        "office": offices,
        "businessType": business_types,
        "service": services,
        "industry": industries,
        "client": clients,
    }
    for name, counter in optional.items():
        if counter:
            facets[name] = _sorted_counts(counter)
    return facets
