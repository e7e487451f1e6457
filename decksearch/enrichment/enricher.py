"""
Slide enrichment.

Pure transformation of ``(raw slide, deck, optional index record)`` into an
``EnrichedSlide``. No state is shared between slides, so the order in
which slides are enriched does not matter.
"""

import re
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from ..data_models import (
    ELEMENT_IMAGE,
    ELEMENT_TABLE,
    DeckDescriptor,
    EnrichedSlide,
    IndexRecord,
    Metric,
    RawSlide,
    RawSlideElement,
)
from .classifier import classify_slide

if TYPE_CHECKING:
    from ..ingestion.loader import LoadedDecks


SERVICES_MARKER = "Services Used:"
MAX_METRICS = 3

_DIGIT_RE = re.compile(r"\d")
_SERVICE_SPLIT_RE = re.compile(r"[|,&]")


def extract_text(elements: Sequence[RawSlideElement]) -> Tuple[str, int]:
    """Space-join the non-blank element texts; also return how many there were."""
    texts = [el.text for el in elements if el.has_text]
    return " ".join(texts), len(texts)


def extract_metrics(elements: Sequence[RawSlideElement]) -> List[Metric]:
    """First three elements whose text contains a digit, in element order."""
    metrics = [
        Metric(text=el.text, type=el.type)
        for el in elements
        if el.text and _DIGIT_RE.search(el.text)
    ]
    return metrics[:MAX_METRICS]


def extract_services(elements: Sequence[RawSlideElement]) -> List[str]:
    """
    Parse the services list out of a "Services Used: A | B, C & D" element.

    Only the first element carrying the marker is read.
    """
    source = next((el.text for el in elements if el.text and SERVICES_MARKER in el.text), None)
    if not source:
        return []
    remainder = source.replace(SERVICES_MARKER, "", 1).strip()
    return [s.strip() for s in _SERVICE_SPLIT_RE.split(remainder) if s.strip()]


def enrich_text(base_text: str, index_record: Optional[IndexRecord]) -> str:
    """Append index metadata to the slide text as an extra ranking signal."""
    if index_record is None:
        return base_text
    enriched = base_text
    for value in (
        index_record.client,
        index_record.industry,
        index_record.service,
        index_record.business_type,
        index_record.office,
    ):
        if value:
            enriched += f" {value}"
    return enriched


def enrich_slide(
    raw: RawSlide,
    deck: DeckDescriptor,
    index_record: Optional[IndexRecord] = None,
) -> EnrichedSlide:
    """Derive every searchable and categorical field for one slide."""
    elements = list(raw.elements)
    text, element_count = extract_text(elements)

    index_fields: Dict[str, Optional[str]] = {}
    if index_record is not None:
        index_fields = {
            "office": index_record.office,
            "client": index_record.client,
            "index_service": index_record.service,
            "business_type": index_record.business_type,
            "industry": index_record.industry,
            "index_notes": index_record.notes,
        }

    return EnrichedSlide(
        slide_number=raw.slide_number,
        slide_id=raw.slide_id,
        notes=raw.notes,
        elements=tuple(elements),
        deck_display_name=deck.display_name,
        presentation_id=deck.presentation_id,
        text=text,
        enriched_text=enrich_text(text, index_record),
        category=classify_slide(text, raw.notes, deck.display_name, elements, index_record),
        metrics=tuple(extract_metrics(elements)),
        services=tuple(extract_services(elements)),
        element_count=element_count,
        has_images=any(el.type == ELEMENT_IMAGE for el in elements),
        has_tables=any(el.type == ELEMENT_TABLE for el in elements),
        **index_fields,
    )


def build_corpus(loaded: "LoadedDecks", indexed_deck_file: str) -> Tuple[EnrichedSlide, ...]:
    """
    Enrich every loaded slide, in manifest then file order.

    Index records join only onto the deck whose file name equals
    ``indexed_deck_file``, matched by slide number.
    """
    corpus: List[EnrichedSlide] = []
    for deck, slides in loaded.slides_by_deck:
        use_index = bool(loaded.index) and deck.file_name == indexed_deck_file
        for raw in slides:
            record = loaded.index.get(raw.slide_number) if use_index else None
            corpus.append(enrich_slide(raw, deck, record))
    return tuple(corpus)
