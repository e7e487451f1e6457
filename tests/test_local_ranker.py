"""Tests for fuzzy ranking, filter composition and suggestions."""

import pytest

from decksearch.data_models import FieldMatch, SearchHit
from decksearch.retrieval import (
    FilterSelection,
    FuzzyConfig,
    FuzzyIndex,
    LocalRanker,
    RankerConfig,
    apply_filters,
    build_suggestions,
    clean_suggestion,
)
from decksearch.retrieval.fuzzy import fold_case


@pytest.fixture
def slides(make_slide):
    return [
        make_slide(1, "Retainer pricing plans", deck="Master Sales Deck"),
        make_slide(2, "Product demo walkthrough", deck="Master Sales Deck"),
        make_slide(1, "Pricing demo for enterprise plans", deck="Product Tour"),
        make_slide(2, "Meet the founders", deck="Product Tour"),
    ]


def _identities(hits):
    return {h.slide.identity for h in hits}


def test_fixture_categories(slides):
    assert [s.category for s in slides] == ["Pricing", "Demos", "Pricing", "About Us"]


def test_empty_query_returns_first_slides_unscored_in_load_order(make_slide):
    many = [make_slide(n, f"Slide body {n}") for n in range(1, 13)]
    result = LocalRanker(many).search("   ")
    assert [h.slide.slide_number for h in result.hits] == list(range(1, 11))
    assert all(h.score is None and h.relevance is None for h in result.hits)
    assert result.suggestions == []


def test_empty_query_applies_filters(slides):
    result = LocalRanker(slides).search("", FilterSelection(deck="Product Tour"))
    assert [h.slide.identity for h in result.hits] == [("Product Tour", 1), ("Product Tour", 2)]


def test_query_matches_relevant_slides(slides):
    hits = LocalRanker(slides).search("pricing").hits
    assert {("Master Sales Deck", 1), ("Product Tour", 1)} <= _identities(hits)
    assert ("Product Tour", 2) not in _identities(hits)


def test_scores_are_normalised_and_ascending(slides):
    hits = LocalRanker(slides).search("pricing plans").hits
    assert hits
    scores = [h.score for h in hits]
    assert scores == sorted(scores)
    for hit in hits:
        assert 0.0 <= hit.score <= 1.0
        assert hit.relevance == pytest.approx((1 - hit.score) * 100)
        assert hit.matches


def test_tolerates_a_misspelling(slides):
    assert ("Master Sales Deck", 1) in _identities(LocalRanker(slides).search("pricng").hits)


def test_single_character_query_matches_nothing(slides):
    assert LocalRanker(slides).search("p").hits == []


def test_stronger_match_ranks_first(make_slide):
    exact = make_slide(1, "Quarterly business review")
    fuzzy = make_slide(2, "Quartely busines reviw")
    hits = LocalRanker([fuzzy, exact]).search("quarterly business review").hits
    assert hits[0].slide.slide_number == 1


def test_matches_report_field_value_and_span(slides):
    hit = LocalRanker(slides).search("founders").hits[0]
    first = hit.matches[0]
    assert isinstance(first, FieldMatch)
    assert first.key == "enrichedText"
    assert first.value == "Meet the founders"
    assert first.fragments == ["founders"]


def test_fragments_index_original_text_when_lowercasing_grows(make_slide):
    slide = make_slide(1, "İİİİ Quarterly pricing review")
    hit = LocalRanker([slide]).search("pricing").hits[0]
    assert hit.matches[0].fragments == ["pricing"]


def test_fold_case_keeps_length():
    assert fold_case("İstanbul PRICING") == "İstanbul pricing"


def test_query_with_zero_slides_is_empty():
    result = LocalRanker([]).search("pricing")
    assert result.hits == []
    assert result.suggestions == []


def test_filter_and_query_compose_in_either_order(slides):
    selection = FilterSelection(category="Pricing")
    ranker = LocalRanker(slides)

    query_then_filter = apply_filters(ranker.search("demo").hits, selection)
    filter_then_query = LocalRanker(apply_filters(slides, selection)).search("demo").hits
    combined = ranker.search("demo", selection).hits

    assert _identities(query_then_filter) == _identities(filter_then_query) == _identities(combined)
    assert ("Product Tour", 1) in _identities(combined)
    assert ("Master Sales Deck", 2) not in _identities(combined)


def test_search_limit_applies_after_filtering(make_slide):
    many = [make_slide(n, "Pricing sheet", deck="A" if n % 2 else "B") for n in range(1, 9)]
    ranker = LocalRanker(many, config=RankerConfig(search_limit=2))
    hits = ranker.search("pricing", FilterSelection(deck="B")).hits
    assert len(hits) == 2
    assert all(h.slide.deck_display_name == "B" for h in hits)


def test_fuzzy_index_is_fixed_at_construction(slides):
    index = FuzzyIndex(slides, config=FuzzyConfig(limit=1))
    assert len(index) == 4
    assert len(index.search("pricing")) == 1


def _hit(slide, value):
    return SearchHit(slide=slide, score=0.1, matches=[FieldMatch(key="text", value=value, indices=[(0, 2)])])


def test_suggestions_truncate_dedupe_and_limit(make_slide):
    slide = make_slide(1, "x")
    long_value = "A" * 80
    hits = [_hit(slide, long_value), _hit(slide, long_value), _hit(slide, "Short")]
    hits += [_hit(slide, f"Other {n}") for n in range(5)]

    suggestions = build_suggestions(hits, limit=5, length=60)
    assert suggestions == ["A" * 60 + "...", "Short...", "Other 0...", "Other 1..."]


def test_clean_suggestion_restores_query():
    assert clean_suggestion("Retainer pricing...") == "Retainer pricing"


def test_search_returns_suggestions_from_top_hits(slides):
    result = LocalRanker(slides).search("founders")
    assert result.suggestions == ["Meet the founders..."]
