"""Shared fixtures: deck directories on disk and slide builders."""

import json

import pytest

from decksearch.config import Settings
from decksearch.data_models import DeckDescriptor, IndexRecord, RawSlide
from decksearch.enrichment import enrich_slide


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def write_decks(tmp_path):
    """Write a manifest, deck files and an optional index; return the directory."""

    def _write_decks(decks, index=None, manifest=None):
        entries = []
        for display_name, (file_name, slides) in decks.items():
            entries.append({"fileName": file_name, "displayName": display_name, "presentationId": "pres-" + file_name})
            _write(tmp_path / file_name, {"slides": slides})
        _write(tmp_path / "decks.json", manifest if manifest is not None else entries)
        if index is not None:
            _write(tmp_path / "global-case-studies-index.json", index)
        return tmp_path

    return _write_decks


@pytest.fixture
def sample_decks(write_decks):
    return write_decks(
        {
            "Sales": ("sales.json", [
                {"slideNumber": 1, "slideId": "s1", "elements": [{"type": "TEXT", "text": "Our price is $99"}]},
                {"slideNumber": 2, "slideId": "s2", "elements": [{"type": "TEXT", "text": "Email hello@example.com"}]},
                {"slideNumber": 3, "slideId": "s3", "elements": [{"type": "TEXT", "text": "Product demo walkthrough"}]},
            ]),
            "Global Case Studies": ("global-case-studies.json", [
                {"slideNumber": 1, "slideId": "g1", "elements": [
                    {"type": "TEXT", "text": "Outdoor Gear Co."},
                    {"type": "TEXT", "text": "Services Used: SEO | PPC, Email"},
                ]},
                {"slideNumber": 3, "slideId": "g3", "elements": [{"type": "TEXT", "text": "Law firm leads"}]},
            ]),
        },
        index=[
            {"slide_number": 1, "office": "London", "client": "Outdoor Gear Co.", "service": "SEO",
             "type": "eCommerce", "industry": "Retail & Outdoor", "notes": "flagship"},
            {"slide_number": 3, "office": "New York", "client": "Smith Law", "service": "PPC",
             "type": "Lead Generation", "industry": "Legal", "notes": ""},
        ],
    )


@pytest.fixture
def deck_settings(sample_decks):
    return Settings(DECKS_DIR=str(sample_decks))


@pytest.fixture
def make_slide():
    """Build an enriched slide from element texts."""

    def _make_slide(number, *texts, deck="Misc", notes=None, index=None, elements=None):
        raw = RawSlide(
            slideNumber=number,
            slideId=f"id{number}",
            notes=notes,
            elements=elements if elements is not None else [{"type": "TEXT", "text": t} for t in texts],
        )
        record = IndexRecord(slide_number=number, **index) if index else None
        descriptor = DeckDescriptor(fileName=f"{deck.lower()}.json", displayName=deck, presentationId="pid")
        return enrich_slide(raw, descriptor, record)

    return _make_slide
