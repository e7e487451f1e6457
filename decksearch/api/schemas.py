"""
API request and response schemas.
"""
from typing import Any, Dict, List, Tuple
from pydantic import BaseModel, Field

from ..retrieval import FilterSelection


class SearchRequest(BaseModel):
    query: str = Field(default="", max_length=1000)
    filters: FilterSelection = Field(default_factory=FilterSelection)


class AISearchRequest(BaseModel):
    ai_query: str = Field(..., alias="aiQuery", min_length=1, max_length=2000)

    class Config:
        populate_by_name = True


class SearchResponse(BaseModel):
    query: str
    total: int = Field(ge=0)
    results: List[Dict[str, Any]] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class AISearchResponse(BaseModel):
    query: str
    total: int = Field(ge=0)
    results: List[Dict[str, Any]] = Field(default_factory=list)
    references: List[Dict[str, Any]] = Field(default_factory=list)


class SlidesResponse(BaseModel):
    total: int = Field(ge=0)
    slides: List[Dict[str, Any]] = Field(default_factory=list)


class FacetsResponse(BaseModel):
    facets: Dict[str, List[Tuple[str, int]]] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str = "1.0.0"
    slides: int = 0
    services: Dict[str, bool] = Field(default_factory=dict)
