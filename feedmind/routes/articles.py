"""
Article routes: list the current items of one feed.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ..config import get_feed_parser
from ..errors import ValidationError
from ..feeds import FeedParser
from ..schemas import ArticleResponse

router = APIRouter(tags=["articles"])


@router.get("/articles")
async def list_articles(
    parser: Annotated[FeedParser, Depends(get_feed_parser)],
    feed_url: Annotated[str | None, Query(alias="feedUrl")] = None,
) -> list[ArticleResponse]:
    """Fetch a feed now and return its normalized items."""
    if not feed_url:
        raise ValidationError("Feed URL is required")

    articles = await parser.fetch_articles(feed_url)
    return [ArticleResponse.from_model(a) for a in articles]
