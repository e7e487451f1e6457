"""
FastAPI dependency injection.
"""
from functools import lru_cache

from ..config import settings
from ..services import SearchService


@lru_cache()
def get_search_service() -> SearchService:
    """Creates and caches the session-scoped search service."""
    return SearchService(config=settings)


def check_services_health(service: SearchService) -> dict:
    """Checks whether decks are loaded and an AI credential is configured."""
    return {
        "decks": service.loaded,
        "gemini": bool(service.config.gemini_api_key),
    }
