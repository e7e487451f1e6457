"""Tests for the ordered heuristic slide classifier."""

import pytest

from decksearch.data_models import IndexRecord, RawSlideElement
from decksearch.enrichment.classifier import CATEGORIES, RULES, classify_slide


def _elements(*texts):
    return [RawSlideElement(type="TEXT", text=t) for t in texts]


def test_sales_deck_with_price_is_pricing():
    assert classify_slide("Our price is $99", None, "Sales", _elements("Our price is $99")) == "Pricing"


def test_sales_deck_with_contact_is_contact():
    assert classify_slide("Email team@agency.io", None, "Sales", []) == "Contact"


def test_index_business_type_precedes_content_rules():
    record = IndexRecord(slide_number=4, type="eCommerce")
    assert classify_slide("Transparent pricing and cost savings", None, "Sales", [], record) == "eCommerce"


def test_index_lead_generation():
    record = IndexRecord(slide_number=4, type="Lead Generation", industry="Legal")
    assert classify_slide("Cost per lead", None, "Misc", [], record) == "Lead Generation"


def test_index_industry_case_study_match_is_case_insensitive():
    record = IndexRecord(slide_number=1, industry="CASE STUDY Archive")
    assert classify_slide("Plain words", None, "Misc", [], record) == "Case Studies"


def test_case_study_deck_name_beats_content():
    assert classify_slide("pricing table", None, "Global Case Studies", []) == "Case Studies"


def test_sales_deck_without_signals_falls_through_to_content():
    assert classify_slide("Our team", None, "Sales Kit", []) == "About Us"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("A customer testimonial", "Case Studies"),
        ("Monthly subscription", "Pricing"),
        ("Feature demo", "Features"),
        ("Product overview", "Demos"),
        ("Get in touch", "Contact"),
        ("The problem we solve", "Solutions"),
        ("Meet the founders", "About Us"),
        ("Table of contents", "Navigation"),
    ],
)
def test_content_rules_in_order(text, expected):
    assert classify_slide(text, None, "Misc", []) == expected


def test_notes_take_part_in_content_rules():
    assert classify_slide("Slide title", "walk through the pricing", "Misc", []) == "Pricing"


def test_substring_matching_is_not_word_bounded():
    assert classify_slide("outpricing rivals", None, "Misc", []) == "Pricing"


def test_metric_elements_when_no_keyword_matched():
    assert classify_slide("42% uplift", None, "Misc", _elements("42% uplift")) == "Metrics & Results"
    assert classify_slide("Up 3 month on month", None, "Misc", _elements("Up 3 month on month")) == "Metrics & Results"


def test_digits_without_metric_marker_are_general():
    assert classify_slide("Route 66", None, "Misc", _elements("Route 66")) == "General"


def test_default_is_general():
    assert classify_slide("Hello world", None, "Misc", []) == "General"


def test_every_rule_label_is_a_known_category():
    assert {label for _, label in RULES} <= set(CATEGORIES)
    assert "General" in CATEGORIES
