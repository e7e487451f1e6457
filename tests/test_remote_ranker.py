"""Tests for the AI ranker boundary: prompt projection, reply parsing, reconciliation."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from decksearch.errors import UpstreamError
from decksearch.providers.base import GenerationResult, LLMProvider
from decksearch.services import (
    RemoteRanker,
    extract_reply_text,
    parse_references,
    resolve_references,
    strip_code_fences,
)
from decksearch.services.prompts import RANKING_SYSTEM_PROMPT, build_ranking_prompt, project_slide

FENCED_REPLY = '```json\n{"relevantSlides":[{"slideNumber":3,"deckDisplayName":"Sales"}]}\n```'


def _gemini_body(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


def test_strip_code_fences():
    assert strip_code_fences(FENCED_REPLY) == '{"relevantSlides":[{"slideNumber":3,"deckDisplayName":"Sales"}]}'
    assert strip_code_fences('{"a": 1}') == '{"a": 1}'


def test_fenced_reply_resolves_against_local_slide(make_slide):
    references = parse_references(FENCED_REPLY)
    assert [r.identity for r in references] == [("Sales", 3)]

    local = [make_slide(3, "Retainer pricing", deck="Sales"), make_slide(3, "Other", deck="Product")]
    resolved = resolve_references(references, local)
    assert len(resolved) == 1
    assert resolved[0].identity == ("Sales", 3)


def test_unknown_reference_is_dropped_silently(make_slide):
    references = parse_references(FENCED_REPLY)
    assert resolve_references(references, [make_slide(3, "x", deck="Product")]) == []
    assert resolve_references(references, []) == []


def test_resolution_keeps_reference_order(make_slide):
    a = make_slide(1, "a", deck="Sales")
    b = make_slide(2, "b", deck="Sales")
    reply = json.dumps({"relevantSlides": [
        {"slideNumber": 2, "deckDisplayName": "Sales"},
        {"slideNumber": 9, "deckDisplayName": "Sales"},
        {"slideNumber": 1, "deckDisplayName": "Sales"},
    ]})
    assert resolve_references(parse_references(reply), [a, b]) == [b, a]


@pytest.mark.parametrize("reply", ['{"slides": []}', '{"relevantSlides": "none"}', "[1, 2]", '{"relevantSlides": []}'])
def test_reply_without_expected_array_is_zero_results(reply):
    assert parse_references(reply) == []


def test_malformed_entries_are_skipped():
    reply = '{"relevantSlides": [{"slideNumber": 1}, {"slideNumber": 2, "deckDisplayName": "Sales"}]}'
    assert [r.slide_number for r in parse_references(reply)] == [2]


@pytest.mark.parametrize("reply", ["", "   ", None, "Here are the slides you asked for"])
def test_empty_or_prose_reply_is_upstream_error(reply):
    with pytest.raises(UpstreamError):
        parse_references(reply)


def test_extract_reply_text():
    assert extract_reply_text(_gemini_body("hi")) == "hi"
    assert extract_reply_text({"candidates": []}) is None
    assert extract_reply_text({}) is None


def test_projection_carries_case_study_metadata(make_slide):
    slide = make_slide(
        4, "Services Used: SEO", deck="Global Case Studies", notes="speaker",
        index={"client": "Acme", "industry": "Retail", "type": "eCommerce", "office": "London"},
    )
    projected = project_slide(slide)
    assert projected == {
        "slideNumber": 4,
        "deckDisplayName": "Global Case Studies",
        "text": "Services Used: SEO",
        "category": "eCommerce",
        "services": ["SEO"],
        "client": "Acme",
        "industry": "Retail",
        "businessType": "eCommerce",
        "office": "London",
        "notes": "speaker",
    }


def test_prompt_contains_query_and_slide_data(make_slide):
    prompt = build_ranking_prompt("ecommerce wins", [make_slide(1, "Hello", deck="Sales")])
    assert prompt.startswith('User Query: "ecommerce wins"')
    data = json.loads(prompt.split("All Slide Data:\n", 1)[1])
    assert data[0]["deckDisplayName"] == "Sales"
    assert '"relevantSlides"' in RANKING_SYSTEM_PROMPT


@pytest.mark.asyncio
async def test_rank_round_trip(make_slide):
    provider = AsyncMock()
    provider.generate.return_value = GenerationResult(text=FENCED_REPLY, raw_response=_gemini_body(FENCED_REPLY))
    slides = [make_slide(3, "Retainer pricing", deck="Sales")]

    result = await RemoteRanker(provider).rank("pricing", slides)

    assert [s.identity for s in result.slides] == [("Sales", 3)]
    assert result.raw_response == _gemini_body(FENCED_REPLY)
    kwargs = provider.generate.await_args.kwargs
    assert kwargs["system_prompt"] == RANKING_SYSTEM_PROMPT


@pytest.mark.asyncio
async def test_rank_falls_back_to_body_text(make_slide):
    provider = AsyncMock()
    provider.generate.return_value = GenerationResult(text="", raw_response=_gemini_body(FENCED_REPLY))
    result = await RemoteRanker(provider).rank("pricing", [make_slide(3, "x", deck="Sales")])
    assert len(result.slides) == 1


@pytest.mark.asyncio
async def test_rank_propagates_upstream_failure(make_slide):
    provider = AsyncMock()
    provider.generate.side_effect = UpstreamError("Gemini API responded with status: 503", status_code=503)
    with pytest.raises(UpstreamError) as exc_info:
        await RemoteRanker(provider).rank("pricing", [make_slide(1, "x")])
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_provider_needs_only_generate(make_slide):
    class _ReplyProvider(LLMProvider):
        async def generate(self, prompt, system_prompt=None, model=None):
            return GenerationResult(text=FENCED_REPLY)

    slides = [make_slide(3, "Retainer pricing", deck="Sales")]
    result = await RemoteRanker(_ReplyProvider(), model="gemini-2.5-flash").rank("pricing", slides)
    assert [s.identity for s in result.slides] == [("Sales", 3)]


@pytest.mark.asyncio
async def test_rank_sends_prompt_and_model_only(make_slide):
    provider = AsyncMock()
    provider.generate.return_value = GenerationResult(text=FENCED_REPLY)

    await RemoteRanker(provider, model="gemini-2.5-flash").rank("pricing", [make_slide(3, "x", deck="Sales")])

    assert set(provider.generate.await_args.kwargs) == {"system_prompt", "model"}
