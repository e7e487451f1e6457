"""
Deck search package.
Knowledge-base search over presentation decks exported as JSON.

USAGE:
======
```python
from decksearch.services import SearchService, SearchSession

service = SearchService()
await service.refresh()

result = service.search("seo case study")
for hit in result.hits:
    print(hit.slide.deck_display_name, hit.slide.slide_number, hit.relevance)

ai = await service.ai_search("slides about ecommerce growth")
```

Modules:
- ingestion: manifest, deck files and case-study index
- enrichment: derived text, category, metrics, services
- retrieval: weighted fuzzy search and categorical filters
- services: search service, sessions and the AI ranker
- api: FastAPI application
"""
__version__ = "1.0.0"

__all__ = [
    "SearchService",
    "SearchSession",
    "FilterSelection",
    "EnrichedSlide",
]


def __getattr__(name: str):
    """Lazy import so configuration and logging load only when needed."""
    if name in ("SearchService", "SearchSession"):
        from .services import SearchService, SearchSession
        return locals()[name]

    if name == "FilterSelection":
        from .retrieval import FilterSelection
        return FilterSelection

    if name == "EnrichedSlide":
        from .data_models import EnrichedSlide
        return EnrichedSlide

    raise AttributeError(f"module 'decksearch' has no attribute '{name}'")
