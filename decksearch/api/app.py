"""
FastAPI application factory.
"""
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config import settings
from ..errors import ConfigurationError, DeckLoadError, UpstreamError
from ..logger import logger
from ..services import SearchService
from .dependencies import check_services_health, get_search_service
from .routes import relay_router, router
from .schemas import HealthResponse

CONFIGURATION_ERROR = "Server configuration error."
INTERNAL_ERROR = "An internal server error occurred."


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings.ensure_directories()
    logger.info(f"Deck search API starting, decks directory: {settings.data_dir}")
    try:
        await get_search_service().refresh()
    except (ConfigurationError, DeckLoadError) as e:
        logger.error(f"Error loading decks: {e}")
    yield
    logger.info("Deck search API shutting down...")


def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def register_exception_handlers(application: FastAPI) -> None:

    @application.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @application.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, "Invalid request.")

    @application.exception_handler(ConfigurationError)
    async def configuration_error(request: Request, exc: ConfigurationError) -> JSONResponse:
        logger.error(f"Configuration error in {request.url.path}: {exc}")
        return _error(500, CONFIGURATION_ERROR)

    @application.exception_handler(UpstreamError)
    async def upstream_error(request: Request, exc: UpstreamError) -> JSONResponse:
        logger.error(f"Error in {request.url.path}: {exc} (upstream status {exc.status_code})")
        return _error(500, INTERNAL_ERROR)

    @application.exception_handler(DeckLoadError)
    async def deck_load_error(request: Request, exc: DeckLoadError) -> JSONResponse:
        logger.error(f"Error in {request.url.path}: {exc}")
        return _error(500, INTERNAL_ERROR)

    @application.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Error in {request.url.path}: {exc}")
        return _error(500, INTERNAL_ERROR)


def create_app() -> FastAPI:
    """Creates and configures FastAPI application."""
    application = FastAPI(
        title="Deck Search API",
        description="Fuzzy and AI search over presentation decks",
        version=__version__,
        lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        # Wildcard origin with credentials is invalid in browsers.
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application)
    application.include_router(relay_router)
    application.include_router(router)

    @application.get("/health", response_model=HealthResponse)
    async def health_check(service: SearchService = Depends(get_search_service)) -> HealthResponse:
        services = check_services_health(service)
        return HealthResponse(
            status="healthy" if all(services.values()) else "degraded",
            version=__version__,
            slides=len(service.slides),
            services=services,
        )

    @application.get("/")
    async def root():
        return {
            "name": "Deck Search API",
            "version": __version__,
            "endpoints": {
                "health": "/health",
                "ai_search_relay": "/api/ai-search",
                "slides": "/api/v1/slides",
                "search": "/api/v1/search",
                "ai_search": "/api/v1/ai-search",
                "facets": "/api/v1/facets",
                "reload": "/api/v1/reload",
            },
            "docs": "/docs"
        }

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "decksearch.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )
