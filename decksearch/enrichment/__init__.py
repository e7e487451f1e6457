"""
Slide enrichment: derived text, category, metrics and services.

Example usage:
    >>> from decksearch.enrichment import enrich_slide, classify_slide
    >>> slide = enrich_slide(raw_slide, deck)
    >>> slide.category
    'Pricing'
"""

from .classifier import CATEGORIES, classify_slide
from .enricher import (
    build_corpus,
    enrich_slide,
    extract_metrics,
    extract_services,
    extract_text,
)

__all__ = [
    "CATEGORIES",
    "classify_slide",
    "build_corpus",
    "enrich_slide",
    "extract_metrics",
    "extract_services",
    "extract_text",
]
