"""
Prompts for the remote (AI) ranker.
"""
import json
from typing import Any, Dict, List, Sequence

from ..data_models import EnrichedSlide

RESULT_KEY = "relevantSlides"

RANKING_SYSTEM_PROMPT = """You are an intelligent presentation assistant. The user will provide a query. Your task is to analyze the following JSON data which contains slides from MULTIPLE presentations and identify the slides that are most relevant to the user's query.

Each slide has:
- text: extracted content from all slide elements
- category: automatically detected category (Pricing, Features, Case Studies, etc.)
- services, client, industry, businessType, office: case study metadata, when known
- notes: speaker notes
- deckDisplayName: the presentation deck name
- slideNumber: the slide number

Respond with ONLY a JSON object containing a single key "relevantSlides". This key should hold an array of objects, where each object has two keys: "slideNumber" (the number of the relevant slide) and "deckDisplayName" (the name of the deck the slide belongs to).

Prioritize slides based on:
1. Direct text content matches
2. Category relevance to the query
3. Context from notes

It is crucial that you identify the correct source deck for each slide.

Do not add any explanation or introductory text. Only the JSON object is required. If no slides are relevant, return an empty array.

Example response: {"relevantSlides": [{"slideNumber": 15, "deckDisplayName": "Master Sales Deck"}, {"slideNumber": 8, "deckDisplayName": "Global Case Studies"}]}"""


def project_slide(slide: EnrichedSlide) -> Dict[str, Any]:
    """The subset of a slide sent to the remote ranker."""
    return {
        "slideNumber": slide.slide_number,
        "deckDisplayName": slide.deck_display_name,
        "text": slide.text,
        "category": slide.category,
        "services": list(slide.services),
        "client": slide.client,
        "industry": slide.industry,
        "businessType": slide.business_type,
        "office": slide.office,
        "notes": slide.notes,
    }


def project_slides(slides: Sequence[EnrichedSlide]) -> List[Dict[str, Any]]:
    return [project_slide(s) for s in slides]


def build_ranking_prompt(query: str, slides: Sequence[EnrichedSlide]) -> str:
    slide_data = json.dumps(project_slides(slides), ensure_ascii=False)
    return f'User Query: "{query}"\n\nAll Slide Data:\n{slide_data}'
