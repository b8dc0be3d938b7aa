"""
AI routes: summary, analysis and recommendations.
"""

import logging
from itertools import chain, zip_longest
from typing import Annotated

from fastapi import APIRouter, Depends

from ..config import config, get_feed_parser, get_insights, get_store
from ..errors import require_text
from ..feed_store import FeedStore
from ..feeds import FeedParser
from ..insights import ArticleAnalysis
from ..models import Article
from ..schemas import (
    ArticleResponse,
    ArticleTextRequest,
    RecommendRequest,
    RecommendResponse,
    SummaryResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["insights"])


@router.post("/summary")
async def summarize_article(request: ArticleTextRequest) -> SummaryResponse:
    """Friendly free-form summary of one article."""
    title = require_text(request.title, "Title is required and must be a string")
    summary = await get_insights().summarize(title, request.content_snippet)
    return SummaryResponse(summary=summary)


@router.post("/analyze")
async def analyze_article(request: ArticleTextRequest) -> ArticleAnalysis:
    """Categories, sentiment, keywords and reading time for one article."""
    title = require_text(request.title, "Title is required and must be a string")
    return await get_insights().analyze(title, request.content_snippet)


@router.post("/recommend")
async def recommend_articles(
    request: RecommendRequest,
    store: Annotated[FeedStore, Depends(get_store)],
    parser: Annotated[FeedParser, Depends(get_feed_parser)],
) -> RecommendResponse:
    """Recommend related articles from the request catalog or subscribed feeds."""
    article_id = require_text(request.article_id, "Article ID is required")
    insights = get_insights()

    if request.articles is not None:
        catalog = [a.to_model() for a in request.articles][:config.RECOMMEND_CATALOG_LIMIT]
    else:
        catalog = await load_catalog(store, parser, config.RECOMMEND_CATALOG_LIMIT)

    recommendations, articles = await insights.recommend(
        article_id,
        catalog,
        user_preferences=request.user_preferences,
        recently_read=request.recently_read,
    )
    return RecommendResponse(
        recommendations=recommendations,
        articles=[ArticleResponse.from_model(a) for a in articles],
    )


async def load_catalog(store: FeedStore, parser: FeedParser, limit: int) -> list[Article]:
    """
    Fetch every subscribed feed and interleave their items.

    Feeds that fail are skipped. Interleaving keeps one busy feed from
    filling the whole catalog before the limit is reached.
    """
    feeds = store.list_feeds()
    if not feeds:
        return []

    results = await parser.fetch_many([f.url for f in feeds])
    per_feed: list[list[Article]] = []
    for feed, result in zip(feeds, results):
        if isinstance(result, Exception):
            logger.warning(f"Skipping {feed.url} in recommendation catalog: {result}")
            continue
        per_feed.append(result)

    interleaved = chain.from_iterable(zip_longest(*per_feed))
    return [a for a in interleaved if a is not None][:limit]
