"""
Search service and per-user search session.

``SearchService`` owns the enriched slide set and the local ranker built
from it. A refresh builds a complete new ranker and swaps it in with a
single assignment, so an in-flight search always sees one consistent
slide set.

``SearchSession`` holds what one user currently sees: query, filters and
the displayed result set. Remote (AI) failures never touch the displayed
results, and a reply that arrives after a newer query is discarded.
"""
import asyncio
from typing import Callable, Dict, List, Optional, Tuple

from ..config import Settings, settings as default_settings
from ..data_models import EnrichedSlide, SearchHit
from ..enrichment import build_corpus
from ..errors import ConfigurationError, UpstreamError
from ..ingestion import DeckLoader
from ..logger import logger
from ..providers.base import LLMProvider
from ..retrieval import FilterSelection, LocalRanker, LocalSearchResult, build_facets, clean_suggestion
from .remote_ranker import RemoteRanker, RemoteRankResult

AI_FAILURE_MESSAGE = "Failed to get a response from the AI assistant."
CONFIGURATION_MESSAGE = "AI search is not configured on this server."


def _default_provider_factory(config: Settings) -> Callable[[], LLMProvider]:
    def factory() -> LLMProvider:
        from ..providers import GeminiLLMProvider
        return GeminiLLMProvider(api_key=config.gemini_api_key, default_model=config.gemini_model)
    return factory


class SearchService:
    """Loads, enriches and searches the deck collection."""

    def __init__(
        self,
        loader: Optional[DeckLoader] = None,
        provider_factory: Optional[Callable[[], LLMProvider]] = None,
        config: Optional[Settings] = None,
    ):
        self.config = config or default_settings
        self.loader = loader or DeckLoader(config=self.config)
        self.provider_factory = provider_factory or _default_provider_factory(self.config)
        self._ranker = LocalRanker.from_settings((), self.config)
        self._refresh_lock = asyncio.Lock()
        self.loaded = False

    @property
    def slides(self) -> Tuple[EnrichedSlide, ...]:
        return self._ranker.slides

    async def load_corpus(self) -> Tuple[EnrichedSlide, ...]:
        """Load and enrich the full deck set without touching the current ranker."""
        loaded = await self.loader.load()
        return build_corpus(loaded, self.config.indexed_deck_file)

    async def refresh(self) -> Tuple[EnrichedSlide, ...]:
        """Rebuild the slide set and ranker, then swap them in."""
        async with self._refresh_lock:
            slides = await self.load_corpus()
            ranker = LocalRanker.from_settings(slides, self.config)
            self._ranker = ranker
            self.loaded = True
        logger.info(f"Search index ready with {len(slides)} slides")
        return slides

    async def ensure_loaded(self) -> None:
        if not self.loaded:
            await self.refresh()

    def search(self, query: str = "", filters: Optional[FilterSelection] = None) -> LocalSearchResult:
        return self._ranker.search(query, filters)

    def facets(self) -> Dict[str, List[Tuple[str, int]]]:
        return build_facets(self.slides)

    def remote_ranker(self) -> RemoteRanker:
        """Build a remote ranker. Raises ``ConfigurationError`` without a credential."""
        return RemoteRanker(self.provider_factory(), model=self.config.gemini_model)

    async def ai_search(self, query: str, slides: Optional[Tuple[EnrichedSlide, ...]] = None) -> RemoteRankResult:
        remote = self.remote_ranker()
        return await remote.rank(query, self.slides if slides is None else slides)


class SearchSession:
    """One user's view: current query, filters and displayed results."""

    def __init__(self, service: SearchService):
        self.service = service
        self.query = ""
        self.filters = FilterSelection()
        self.results: List[SearchHit] = []
        self.suggestions: List[str] = []
        self.ai_error: Optional[str] = None
        self._generation = 0

    def _show(self, result: LocalSearchResult) -> List[SearchHit]:
        self._generation += 1
        self.results = result.hits
        self.suggestions = result.suggestions
        return self.results

    def search(self, query: str) -> List[SearchHit]:
        self.query = query
        return self._show(self.service.search(query, self.filters))

    def set_filter(self, dimension: str, value: str) -> List[SearchHit]:
        self.filters = self.filters.with_value(dimension, value)
        return self._show(self.service.search(self.query, self.filters))

    def clear_filters(self) -> List[SearchHit]:
        self.filters = FilterSelection.cleared()
        return self._show(self.service.search(self.query, self.filters))

    def pick_suggestion(self, suggestion: str) -> List[SearchHit]:
        return self.search(clean_suggestion(suggestion))

    async def ai_search(self, query: str) -> bool:
        """
        Run an AI search and display its slides if it is still the latest query.

        Returns True when the displayed results were replaced.
        """
        if not query.strip() or not self.service.slides:
            return False

        self._generation += 1
        ticket = self._generation
        self.ai_error = None

        try:
            result = await self.service.ai_search(query)
        except ConfigurationError as e:
            logger.error(f"AI search is not configured: {e}")
            if ticket == self._generation:
                self.ai_error = CONFIGURATION_MESSAGE
            return False
        except UpstreamError as e:
            logger.error(f"AI search failed: {e} (upstream status {e.status_code})")
            if ticket == self._generation:
                self.ai_error = AI_FAILURE_MESSAGE
            return False

        if ticket != self._generation:
            logger.debug(f"Discarding superseded AI results for '{query}'")
            return False

        self.results = [SearchHit(slide=s) for s in result.slides]
        self.suggestions = []
        return True
