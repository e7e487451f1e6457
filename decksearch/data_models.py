"""
Data models for decks, slides, index records and search results.
Used throughout the application for type safety and validation.

Attribute names are snake_case; aliases carry the camelCase wire format of
the exported deck files, so ``model_dump(by_alias=True)`` round-trips them.
"""
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator


ELEMENT_TEXT = "TEXT"
ELEMENT_IMAGE = "IMAGE"
ELEMENT_TABLE = "TABLE"

ALL = "All"

SLIDES_URL_TEMPLATE = "https://docs.google.com/presentation/d/{presentation_id}/edit#slide=id.{slide_id}"
PLACEHOLDER_PRESENTATION_ID = "YOUR_PRESENTATION_ID"


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class DeckDescriptor(BaseModel):
    """One entry of the deck manifest."""
    file_name: str = Field(..., alias="fileName", min_length=1)
    display_name: str = Field(..., alias="displayName")
    presentation_id: str = Field(default="", alias="presentationId")

    class Config:
        frozen = True
        populate_by_name = True


class IndexRecord(BaseModel):
    """Business metadata for one slide of the indexed case-study deck."""
    slide_number: int
    office: Optional[str] = None
    client: Optional[str] = None
    service: Optional[str] = None
    business_type: Optional[str] = Field(default=None, alias="type")
    industry: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        frozen = True
        populate_by_name = True
        extra = "ignore"

    @field_validator("office", "client", "service", "business_type", "industry", "notes", mode="before")
    @classmethod
    def _empty_is_absent(cls, v):
        return _blank_to_none(v)


class RawSlideElement(BaseModel):
    type: Optional[str] = None
    text: Optional[str] = None

    class Config:
        frozen = True
        extra = "allow"

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())


class RawSlide(BaseModel):
    slide_number: int = Field(..., alias="slideNumber")
    slide_id: str = Field(default="", alias="slideId")
    notes: Optional[str] = None
    elements: List[RawSlideElement] = Field(default_factory=list)

    class Config:
        frozen = True
        populate_by_name = True
        extra = "allow"

    @field_validator("elements", mode="before")
    @classmethod
    def _null_elements(cls, v):
        return [] if v is None else v


class DeckFile(BaseModel):
    slides: List[RawSlide] = Field(default_factory=list)

    class Config:
        extra = "allow"

    @field_validator("slides", mode="before")
    @classmethod
    def _null_slides(cls, v):
        return [] if v is None else v


class Metric(BaseModel):
    text: str
    type: Optional[str] = None

    class Config:
        frozen = True


class EnrichedSlide(BaseModel):
    """A raw slide plus provenance, index metadata and derived search fields."""
    slide_number: int = Field(..., alias="slideNumber")
    slide_id: str = Field(default="", alias="slideId")
    notes: Optional[str] = None
    elements: Tuple[RawSlideElement, ...] = ()

    deck_display_name: str = Field(..., alias="deckDisplayName")
    presentation_id: str = Field(default="", alias="presentationId")

    # Only set when an index record matched; None means absent
    office: Optional[str] = None
    client: Optional[str] = None
    index_service: Optional[str] = Field(default=None, alias="indexService")
    business_type: Optional[str] = Field(default=None, alias="businessType")
    industry: Optional[str] = None
    index_notes: Optional[str] = Field(default=None, alias="indexNotes")

    text: str = ""
    enriched_text: str = Field(default="", alias="enrichedText")
    category: str
    metrics: Tuple[Metric, ...] = Field(default=(), max_length=3)
    services: Tuple[str, ...] = ()
    element_count: int = Field(default=0, alias="elementCount")
    has_images: bool = Field(default=False, alias="hasImages")
    has_tables: bool = Field(default=False, alias="hasTables")

    class Config:
        frozen = True
        populate_by_name = True

    @property
    def identity(self) -> Tuple[str, int]:
        return (self.deck_display_name, self.slide_number)

    @property
    def slide_url(self) -> Optional[str]:
        if not self.presentation_id or PLACEHOLDER_PRESENTATION_ID in self.presentation_id:
            return None
        return SLIDES_URL_TEMPLATE.format(
            presentation_id=self.presentation_id,
            slide_id=self.slide_id,
        )

    @property
    def industries(self) -> List[str]:
        if not self.industry:
            return []
        parts = self.industry.replace("&", ",").split(",")
        return [p.strip() for p in parts if p.strip()]

    def to_wire(self) -> dict:
        data = self.model_dump(by_alias=True, exclude_none=True, mode="json")
        data["slideUrl"] = self.slide_url
        return data


class SlideReference(BaseModel):
    """A slide named by the remote ranker; identity only, never a full slide."""
    slide_number: int = Field(..., alias="slideNumber")
    deck_display_name: str = Field(..., alias="deckDisplayName")

    class Config:
        frozen = True
        populate_by_name = True

    @property
    def identity(self) -> Tuple[str, int]:
        return (self.deck_display_name, self.slide_number)


class FieldMatch(BaseModel):
    """Which field matched a query, its full value and the matched span(s)."""
    key: str
    value: str
    indices: List[Tuple[int, int]] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def fragments(self) -> List[str]:
        return [self.value[start:end] for start, end in self.indices]


class SearchHit(BaseModel):
    """A ranked slide. ``score`` is None for unscored browse results."""
    slide: EnrichedSlide
    score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    matches: List[FieldMatch] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def relevance(self) -> Optional[float]:
        if self.score is None:
            return None
        return (1 - self.score) * 100

    def to_wire(self) -> dict:
        return {
            "item": self.slide.to_wire(),
            "score": self.score,
            "relevance": self.relevance,
            "matches": [m.model_dump(mode="json") for m in self.matches],
        }
