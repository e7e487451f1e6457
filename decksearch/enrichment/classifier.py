"""
Heuristic slide classifier.

Assigns every slide exactly one category label by evaluating an ordered
list of ``(predicate, label)`` rules and returning the first match:

    1. index metadata (business type, industry)
    2. deck name ("case stud", "sales" + pricing/contact content)
    3. content keywords, checked against text + notes + deck name
    4. numeric metric elements
    5. "General"

Keyword matching is plain substring containment on lower-cased text, so
"outpricing" matches "pricing". This looseness is kept as-is.

Example:
    >>> classify_slide("Our price is $99", None, "Sales", [])
    'Pricing'
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ..data_models import IndexRecord, RawSlideElement


CASE_STUDIES = "Case Studies"
PRICING = "Pricing"
FEATURES = "Features"
DEMOS = "Demos"
CONTACT = "Contact"
SOLUTIONS = "Solutions"
ABOUT_US = "About Us"
NAVIGATION = "Navigation"
METRICS_AND_RESULTS = "Metrics & Results"
ECOMMERCE = "eCommerce"
LEAD_GENERATION = "Lead Generation"
GENERAL = "General"

CATEGORIES: Tuple[str, ...] = (
    ECOMMERCE,
    LEAD_GENERATION,
    CASE_STUDIES,
    PRICING,
    FEATURES,
    DEMOS,
    CONTACT,
    SOLUTIONS,
    ABOUT_US,
    NAVIGATION,
    METRICS_AND_RESULTS,
    GENERAL,
)

# Narrower keyword sets used only inside sales decks
SALES_PRICING_KEYWORDS = ("pricing", "cost", "$", "price")
SALES_CONTACT_KEYWORDS = ("contact", "email", "phone", "@")

CONTENT_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (CASE_STUDIES, ("case stud", "client", "customer", "testimonial", "result", "success")),
    (PRICING, ("pricing", "cost", "$", "price", "plan", "subscription")),
    (FEATURES, ("feature", "capability", "functionality", "benefit")),
    (DEMOS, ("demo", "example", "showcase", "overview")),
    (CONTACT, ("contact", "email", "phone", "@", "reach", "get in touch")),
    (SOLUTIONS, ("problem", "solution", "challenge", "solve")),
    (ABOUT_US, ("team", "about", "company", "founder")),
    (NAVIGATION, ("index", "table of content", "overview")),
)

METRIC_MARKERS = ("%", "rating", "month")

_DIGIT_RE = re.compile(r"\d")


@dataclass(frozen=True)
class SlideFeatures:
    """Inputs to the classification rules, lower-cased once."""

    content: str
    deck_name: str
    elements: Sequence[RawSlideElement]
    index_record: Optional[IndexRecord]


Predicate = Callable[[SlideFeatures], bool]


def _contains_any(haystack: str, keywords: Sequence[str]) -> bool:
    return any(k in haystack for k in keywords)


def _business_type_is(value: str) -> Predicate:
    def predicate(f: SlideFeatures) -> bool:
        return f.index_record is not None and f.index_record.business_type == value
    return predicate


def _index_industry_is_case_study(f: SlideFeatures) -> bool:
    record = f.index_record
    return record is not None and bool(record.industry) and "case stud" in record.industry.lower()


def _deck_is_case_study(f: SlideFeatures) -> bool:
    return "case stud" in f.deck_name


def _sales_deck_with(keywords: Sequence[str]) -> Predicate:
    def predicate(f: SlideFeatures) -> bool:
        return "sales" in f.deck_name and _contains_any(f.content, keywords)
    return predicate


def _content_has(keywords: Sequence[str]) -> Predicate:
    def predicate(f: SlideFeatures) -> bool:
        return _contains_any(f.content, keywords)
    return predicate


def _has_metric_element(f: SlideFeatures) -> bool:
    for element in f.elements:
        text = element.text
        if text and _DIGIT_RE.search(text) and _contains_any(text, METRIC_MARKERS):
            return True
    return False


def _build_rules() -> List[Tuple[Predicate, str]]:
    rules: List[Tuple[Predicate, str]] = [
        (_business_type_is("eCommerce"), ECOMMERCE),
        (_business_type_is("Lead Generation"), LEAD_GENERATION),
        (_index_industry_is_case_study, CASE_STUDIES),
        (_deck_is_case_study, CASE_STUDIES),
        (_sales_deck_with(SALES_PRICING_KEYWORDS), PRICING),
        (_sales_deck_with(SALES_CONTACT_KEYWORDS), CONTACT),
    ]
    rules.extend((_content_has(keywords), label) for label, keywords in CONTENT_KEYWORDS)
    rules.append((_has_metric_element, METRICS_AND_RESULTS))
    return rules


RULES: Tuple[Tuple[Predicate, str], ...] = tuple(_build_rules())


def classify_slide(
    text: str,
    notes: Optional[str],
    deck_display_name: str,
    elements: Sequence[RawSlideElement],
    index_record: Optional[IndexRecord] = None,
) -> str:
    """Return the category label of the first matching rule, else ``General``."""
    features = SlideFeatures(
        content=f"{text} {notes or ''} {deck_display_name}".lower(),
        deck_name=deck_display_name.lower(),
        elements=elements or (),
        index_record=index_record,
    )
    for predicate, label in RULES:
        if predicate(features):
            return label
    return GENERAL
