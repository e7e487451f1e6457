"""
Remote ranker.

Delegates relevance ranking to an external LLM: sends a fixed instruction
prompt plus a projection of every slide, parses the reply into slide
references and resolves them back to local slides.

References are resolved on ``(deckDisplayName, slideNumber)`` jointly
since slide numbers repeat across decks. A reference naming no local
slide is dropped.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from ..data_models import EnrichedSlide, SlideReference
from ..errors import UpstreamError
from ..providers.base import LLMProvider
from .prompts import RANKING_SYSTEM_PROMPT, RESULT_KEY, build_ranking_prompt

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?")


@dataclass
class RemoteRankResult:
    query: str
    raw_response: Dict[str, Any] = field(default_factory=dict)
    references: List[SlideReference] = field(default_factory=list)
    slides: List[EnrichedSlide] = field(default_factory=list)


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def extract_reply_text(raw_response: Dict[str, Any]) -> Optional[str]:
    """Text of the first candidate part of a relayed Gemini response body."""
    try:
        return raw_response["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None


def parse_references(text: Optional[str]) -> List[SlideReference]:
    """
    Parse the model's reply into slide references.

    Raises ``UpstreamError`` when there is no reply or it is not JSON; a
    JSON reply without the expected array is zero references.
    """
    if not text or not text.strip():
        raise UpstreamError("No content received from AI.")

    cleaned = strip_code_fences(text)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"AI reply is not valid JSON: {cleaned[:200]}")
        raise UpstreamError(f"AI reply is not valid JSON: {e}") from e

    items = payload.get(RESULT_KEY) if isinstance(payload, dict) else None
    if not isinstance(items, list):
        logger.info(f"AI reply has no '{RESULT_KEY}' array, treating as no results")
        return []

    references: List[SlideReference] = []
    for item in items:
        try:
            references.append(SlideReference.model_validate(item))
        except ValidationError:
            logger.debug(f"Skipping malformed slide reference: {item!r}")
    return references


def resolve_references(
    references: Sequence[SlideReference],
    slides: Sequence[EnrichedSlide],
) -> List[EnrichedSlide]:
    """Map references to local slides in reference order, dropping unknown ones."""
    by_identity: Dict = {}
    for slide in slides:
        by_identity.setdefault(slide.identity, slide)

    resolved: List[EnrichedSlide] = []
    for ref in references:
        slide = by_identity.get(ref.identity)
        if slide is None:
            logger.debug(f"Dropping unresolved AI reference {ref.identity}")
            continue
        resolved.append(slide)
    return resolved


class RemoteRanker:
    """Ranks slides for a natural-language query through an LLM provider."""

    def __init__(self, provider: LLMProvider, model: Optional[str] = None):
        self.provider = provider
        self.model = model

    async def generate(self, query: str, slides: Sequence[EnrichedSlide]):
        """One round trip to the provider; returns its ``GenerationResult``."""
        prompt = build_ranking_prompt(query, slides)
        logger.info(f"AI search '{query}' over {len(slides)} slides")
        return await self.provider.generate(
            prompt,
            system_prompt=RANKING_SYSTEM_PROMPT,
            model=self.model,
        )

    async def rank(self, query: str, slides: Sequence[EnrichedSlide]) -> RemoteRankResult:
        result = await self.generate(query, slides)
        text = result.text or extract_reply_text(result.raw_response)
        references = parse_references(text)
        resolved = resolve_references(references, slides)
        logger.info(f"AI search resolved {len(resolved)} of {len(references)} references")
        return RemoteRankResult(
            query=query,
            raw_response=result.raw_response,
            references=references,
            slides=resolved,
        )
