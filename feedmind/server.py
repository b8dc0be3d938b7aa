"""
FeedMind API Server

FastAPI application providing endpoints for:
- Feed management (list, add, remove, validate, OPML)
- Article listing
- AI summary, analysis and recommendations
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import __version__
from .config import config, configure_logging, state
from .errors import FeedMindError
from .feed_store import FeedStore
from .feeds import FeedParser
from .insights import ArticleInsights
from .providers import get_provider_from_env
from .routes import articles_router, feeds_router, insights_router, misc_router
from .storage import JsonFileStorage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize application resources."""
    # Skip if already initialized (e.g., by tests)
    if state.store is None:
        configure_logging()

        storage = JsonFileStorage(config.FEEDS_PATH)
        storage.ensure_exists()
        state.store = FeedStore(storage)
        state.feed_parser = FeedParser(
            timeout=config.FEED_FETCH_TIMEOUT,
            block_private_urls=config.BLOCK_PRIVATE_URLS,
        )

        state.provider = get_provider_from_env(
            openai_key=config.OPENAI_API_KEY or None,
            anthropic_key=config.ANTHROPIC_API_KEY or None,
            google_key=config.GOOGLE_API_KEY or None,
            preferred_provider=config.LLM_PROVIDER or None,
            default_model=config.LLM_MODEL or None,
        )
        if state.provider:
            state.insights = ArticleInsights(provider=state.provider)
            logger.info(f"LLM provider initialized: {state.provider.name}")
        else:
            logger.warning(
                "No LLM API key configured. Set OPENAI_API_KEY, ANTHROPIC_API_KEY, "
                "or GOOGLE_API_KEY. Summary, analysis and recommendations disabled."
            )

    yield


async def feedmind_error_handler(request: Request, exc: FeedMindError) -> JSONResponse:
    """Turn domain errors into JSON responses with their mapped status."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors (400), like missing fields."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    detail = f"Invalid request: {location}: {message}" if location else f"Invalid request: {message}"
    return JSONResponse(status_code=400, content={"detail": detail})


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app = FastAPI(
    title="FeedMind API",
    version=__version__,
    lifespan=lifespan
)

app.add_exception_handler(FeedMindError, feedmind_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, unexpected_error_handler)

# Include routers
app.include_router(misc_router)
app.include_router(feeds_router)
app.include_router(articles_router)
app.include_router(insights_router)
