"""
Configuration and application state management.
"""

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from .errors import FeedMindError, ProviderUnavailable

if TYPE_CHECKING:
    from .feed_store import FeedStore
    from .feeds import FeedParser
    from .insights import ArticleInsights
    from .providers import LLMProvider

# Load environment variables
load_dotenv()


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


class Config:
    """Application configuration from environment."""
    # LLM provider configuration
    # If LLM_PROVIDER is not set, the first available key wins: OpenAI > Anthropic > Google
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "")
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", "")
    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "")
    LLM_MODEL: str = os.getenv("LLM_MODEL", "")

    FEEDS_PATH: Path = Path(os.getenv("FEEDS_PATH", "./data/feeds.json"))
    FEED_FETCH_TIMEOUT: float = float(os.getenv("FEED_FETCH_TIMEOUT", "10"))
    BLOCK_PRIVATE_URLS: bool = _parse_bool(os.getenv("BLOCK_PRIVATE_URLS"), default=True)
    RECOMMEND_CATALOG_LIMIT: int = int(os.getenv("RECOMMEND_CATALOG_LIMIT", "50"))

    PORT: int = int(os.getenv("PORT", "5005"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def has_llm_key(cls) -> bool:
        """Check if any LLM API key is configured."""
        return bool(cls.OPENAI_API_KEY or cls.ANTHROPIC_API_KEY or cls.GOOGLE_API_KEY)


config = Config()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or config.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class AppState:
    """Shared application state."""
    store: "FeedStore | None" = None
    feed_parser: "FeedParser | None" = None
    provider: "LLMProvider | None" = None
    insights: "ArticleInsights | None" = None


state = AppState()


def get_store() -> "FeedStore":
    """Dependency to get the feed store."""
    if not state.store:
        raise FeedMindError("Feed store not initialized")
    return state.store


def get_feed_parser() -> "FeedParser":
    """Dependency to get the feed parser."""
    if not state.feed_parser:
        raise FeedMindError("Feed parser not initialized")
    return state.feed_parser


def get_insights() -> "ArticleInsights":
    """Dependency to get the AI insights service."""
    if not state.insights:
        raise ProviderUnavailable(
            "AI features not configured. Set OPENAI_API_KEY, ANTHROPIC_API_KEY "
            "or GOOGLE_API_KEY."
        )
    return state.insights
