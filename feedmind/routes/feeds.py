"""
Feed routes: subscription management, validation, OPML import/export.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from ..config import get_feed_parser, get_store
from ..errors import DuplicateFeed, FeedMindError, FetchError, InvalidFeed, ParseError, ValidationError
from ..feed_store import FeedStore
from ..feeds import FeedParser
from ..opml import generate_opml, parse_opml
from ..schemas import (
    AddFeedRequest,
    FeedResponse,
    FeedValidationResponse,
    OPMLImportRequest,
    OPMLImportResponse,
    OPMLImportResult,
    RemoveFeedRequest,
    ValidateFeedRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["feeds"])


# ─────────────────────────────────────────────────────────────
# Feed Management
# ─────────────────────────────────────────────────────────────

@router.get("/feeds")
async def list_feeds(
    store: Annotated[FeedStore, Depends(get_store)]
) -> list[FeedResponse]:
    """List all subscribed feeds."""
    return [FeedResponse.from_model(f) for f in store.list_feeds()]


@router.post("/feeds", status_code=201)
async def add_feed(
    request: AddFeedRequest,
    store: Annotated[FeedStore, Depends(get_store)]
) -> FeedResponse:
    """Subscribe to a new feed."""
    feed = store.add_feed(request.url, request.title)
    return FeedResponse.from_model(feed)


@router.delete("/feeds")
async def remove_feed(
    request: RemoveFeedRequest,
    store: Annotated[FeedStore, Depends(get_store)]
) -> FeedResponse:
    """Unsubscribe from a feed, returning the removed entry."""
    feed = store.remove_feed(request.url)
    return FeedResponse.from_model(feed)


# ─────────────────────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────────────────────

@router.post("/validate-feed")
async def validate_feed(
    request: ValidateFeedRequest,
    parser: Annotated[FeedParser, Depends(get_feed_parser)]
) -> FeedValidationResponse:
    """Check that a URL points at a parseable feed before subscribing."""
    try:
        result = await parser.validate(request.url)
    except (FetchError, ParseError) as e:
        logger.warning(f"Feed validation failed for {request.url}: {e.message}")
        raise InvalidFeed(reason=e.message)
    return FeedValidationResponse.from_model(result)


# ─────────────────────────────────────────────────────────────
# OPML Import/Export
# ─────────────────────────────────────────────────────────────

@router.post("/feeds/import-opml")
async def import_opml(
    request: OPMLImportRequest,
    store: Annotated[FeedStore, Depends(get_store)]
) -> OPMLImportResponse:
    """
    Import feeds from OPML content.

    Each outline goes through the normal add path; feeds already subscribed
    are skipped, invalid ones reported as failed.
    """
    opml_feeds = parse_opml(request.opml_content)
    if not opml_feeds:
        raise ValidationError("No feeds found in OPML")

    results: list[OPMLImportResult] = []
    imported = skipped = failed = 0

    for opml_feed in opml_feeds:
        title = opml_feed.title or opml_feed.url
        try:
            feed = store.add_feed(opml_feed.url, title)
        except DuplicateFeed:
            results.append(OPMLImportResult(
                url=opml_feed.url, title=title, success=False, error="Already subscribed"
            ))
            skipped += 1
        except FeedMindError as e:
            results.append(OPMLImportResult(
                url=opml_feed.url, title=title, success=False, error=e.message
            ))
            failed += 1
        else:
            results.append(OPMLImportResult(url=feed.url, title=feed.title, success=True))
            imported += 1

    logger.info(f"OPML import: {imported} imported, {skipped} skipped, {failed} failed")
    return OPMLImportResponse(
        total=len(opml_feeds),
        imported=imported,
        skipped=skipped,
        failed=failed,
        results=results,
    )


@router.get("/feeds/export-opml")
async def export_opml(
    store: Annotated[FeedStore, Depends(get_store)]
) -> dict:
    """Export all feeds as OPML."""
    feeds = store.list_feeds()
    return {
        "opml": generate_opml(feeds),
        "feed_count": len(feeds),
    }
