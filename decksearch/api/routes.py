"""
API route handlers.
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from ..logger import logger
from ..services import SearchService
from .dependencies import get_search_service
from .schemas import (
    AISearchRequest,
    AISearchResponse,
    FacetsResponse,
    SearchRequest,
    SearchResponse,
    SlidesResponse,
)

AI_QUERY_REQUIRED = "AI query is required."

# Relay endpoint: raw upstream body in, raw upstream body out
relay_router = APIRouter(tags=["ai-search"])

router = APIRouter(prefix="/api/v1", tags=["search"])


@relay_router.post("/api/ai-search")
async def ai_search_relay(
    request: Request,
    search_service: SearchService = Depends(get_search_service),
) -> JSONResponse:
    try:
        body = await request.json()
    except ValueError:
        body = None

    ai_query = body.get("aiQuery") if isinstance(body, dict) else None
    if not isinstance(ai_query, str) or not ai_query.strip():
        raise HTTPException(status_code=400, detail=AI_QUERY_REQUIRED)

    # Raises ConfigurationError before any slide is loaded
    remote = search_service.remote_ranker()

    # Slides are loaded per request on this path
    slides = await search_service.load_corpus()
    result = await remote.generate(ai_query, slides)
    return JSONResponse(status_code=200, content=result.raw_response)


@router.get("/slides", response_model=SlidesResponse)
async def list_slides(
    search_service: SearchService = Depends(get_search_service),
) -> SlidesResponse:
    await search_service.ensure_loaded()
    slides = search_service.slides
    return SlidesResponse(total=len(slides), slides=[s.to_wire() for s in slides])


@router.post("/search", response_model=SearchResponse)
async def search_slides(
    request: SearchRequest,
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    await search_service.ensure_loaded()
    result = search_service.search(request.query, request.filters)
    return SearchResponse(
        query=request.query,
        total=len(result.hits),
        results=[hit.to_wire() for hit in result.hits],
        suggestions=result.suggestions,
    )


@router.post("/ai-search", response_model=AISearchResponse)
async def ai_search_slides(
    request: AISearchRequest,
    search_service: SearchService = Depends(get_search_service),
) -> AISearchResponse:
    if not request.ai_query.strip():
        raise HTTPException(status_code=400, detail=AI_QUERY_REQUIRED)
    await search_service.ensure_loaded()
    result = await search_service.ai_search(request.ai_query)
    return AISearchResponse(
        query=request.ai_query,
        total=len(result.slides),
        results=[s.to_wire() for s in result.slides],
        references=[r.model_dump(by_alias=True) for r in result.references],
    )


@router.get("/facets", response_model=FacetsResponse)
async def get_facets(
    search_service: SearchService = Depends(get_search_service),
) -> FacetsResponse:
    await search_service.ensure_loaded()
    return FacetsResponse(facets=search_service.facets())


@router.post("/reload", response_model=SlidesResponse)
async def reload_slides(
    search_service: SearchService = Depends(get_search_service),
) -> SlidesResponse:
    slides = await search_service.refresh()
    logger.info(f"Reloaded {len(slides)} slides")
    return SlidesResponse(total=len(slides))
