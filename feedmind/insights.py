"""
Article Insights - LLM-powered summaries, analysis and recommendations.

Features:
- Multi-provider support (OpenAI, Anthropic, Google) through LLMProvider
- Friendly free-form summaries
- Structured analysis (categories, sentiment, keywords, reading time)
- Recommendations over a catalog of candidate articles

The provider's output is never trusted: empty output and non-JSON output
where JSON was requested are both GenerationError.
"""

import json
import logging
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .errors import GenerationError
from .models import Article
from .providers import LLMProvider

logger = logging.getLogger(__name__)

UNKNOWN_ARTICLE_TITLE = "Unknown Article"

# Per-candidate snippet length in the recommendation prompt
CATALOG_SNIPPET_CHARS = 300


class ArticleAnalysis(BaseModel):
    """Structured analysis of one article."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    categories: list[str]
    sentiment: str
    keywords: list[str]
    reading_time_minutes: int | None = None

    @field_validator("categories", "keywords", mode="before")
    @classmethod
    def _split_strings(cls, value: Any) -> Any:
        # Models occasionally return "a, b, c" instead of a list
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("sentiment", mode="before")
    @classmethod
    def _lower_sentiment(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("reading_time_minutes", mode="before")
    @classmethod
    def _minutes_from_text(cls, value: Any) -> Any:
        # "4 minutes" -> 4
        if isinstance(value, str):
            match = re.search(r"\d+", value)
            return int(match.group()) if match else None
        if isinstance(value, float):
            return max(1, round(value))
        return value


def _strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence if present."""
    text = text.strip()
    match = re.match(r"^```[a-zA-Z]*\s*\n?(.*?)\n?```$", text, re.DOTALL)
    return match.group(1).strip() if match else text


def _parse_json_object(text: str, failure: str) -> dict:
    try:
        data = json.loads(_strip_code_fence(text))
    except json.JSONDecodeError as e:
        logger.error(f"{failure}: {e}")
        raise GenerationError(failure) from e
    if not isinstance(data, dict):
        logger.error(f"{failure}: expected a JSON object, got {type(data).__name__}")
        raise GenerationError(failure)
    return data


def _article_lines(title: str, content_snippet: str | None) -> str:
    content_line = f"\nContent: {content_snippet}" if content_snippet else ""
    return f"Title: {title}{content_line}"


class ArticleInsights:
    """Summaries, analysis and recommendations from one LLM provider."""

    SUMMARY_SYSTEM_PROMPT = (
        "You are a helpful assistant that writes friendly, conversational "
        "summaries of articles. Keep responses concise but engaging. End with "
        "one fun fact related to the article, then a final line of the most "
        "important keywords, comma separated."
    )

    ANALYSIS_SYSTEM_PROMPT = (
        "You are an AI assistant that analyzes article content. Respond in JSON "
        "with exactly these fields: categories (array of the 3 main categories), "
        "sentiment (one of: positive, negative, neutral), keywords (array of the "
        "5 most relevant keywords), readingTimeMinutes (estimated reading time "
        "of the full article, as an integer)."
    )

    RECOMMEND_SYSTEM_PROMPT = (
        "You are an AI recommendation engine. Based on an article and the "
        "user's preferences, recommend similar articles from the available "
        "collection. Only recommend ids from the collection, never the current "
        "article. Respond in JSON of the form "
        '{"recommendedArticles": ["<id>", ...], '
        '"explanations": {"<id>": "<one sentence reason>"}}.'
    )

    SUMMARY_PARAMS = {"max_tokens": 500, "temperature": 0.7}
    ANALYSIS_PARAMS = {"max_tokens": 500, "temperature": 0.3, "json_mode": True}
    RECOMMEND_PARAMS = {"max_tokens": 500, "temperature": 0.5, "json_mode": True}

    def __init__(self, provider: LLMProvider, model: str | None = None):
        """
        Args:
            provider: LLM provider instance
            model: Optional model override passed on every call
        """
        self.provider = provider
        self.model = model

    async def _generate(
        self, user_prompt: str, system_prompt: str, failure: str, **params
    ) -> str:
        try:
            response = await self.provider.complete_async(
                user_prompt=user_prompt,
                system_prompt=system_prompt,
                model=self.model,
                **params,
            )
        except Exception as e:
            logger.error(f"Provider {self.provider.name} call failed: {e}")
            raise GenerationError(failure) from e
        return (response.text or "").strip()

    async def summarize(self, title: str, content_snippet: str | None = None) -> str:
        """
        Generate a friendly summary.

        Raises:
            GenerationError: If the provider returned no text
        """
        prompt = (
            "Please provide a friendly summary of this article:\n"
            + _article_lines(title, content_snippet)
        )
        summary = await self._generate(
            prompt, self.SUMMARY_SYSTEM_PROMPT, "Failed to generate summary", **self.SUMMARY_PARAMS
        )
        if not summary:
            logger.error(f"Provider {self.provider.name} returned an empty summary")
            raise GenerationError("No summary generated")
        return summary

    async def analyze(self, title: str, content_snippet: str | None = None) -> ArticleAnalysis:
        """
        Categorize an article and estimate sentiment and reading time.

        Raises:
            GenerationError: If the output is empty, not JSON, or the wrong shape
        """
        prompt = (
            "Analyze this article and return JSON data only:\n"
            + _article_lines(title, content_snippet)
        )
        text = await self._generate(
            prompt, self.ANALYSIS_SYSTEM_PROMPT, "Failed to analyze article", **self.ANALYSIS_PARAMS
        )
        if not text:
            logger.error(f"Provider {self.provider.name} returned an empty analysis")
            raise GenerationError("No analysis generated")

        data = _parse_json_object(text, "Failed to parse analysis")
        try:
            return ArticleAnalysis.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Analysis has unexpected shape: {e}")
            raise GenerationError("Failed to parse analysis") from e

    async def recommend(
        self,
        article_id: str,
        catalog: list[Article],
        user_preferences: dict | None = None,
        recently_read: list[str] | None = None,
    ) -> tuple[dict, list[Article]]:
        """
        Recommend articles from ``catalog`` related to ``article_id``.

        Returns:
            (raw recommendations object, catalog articles it recommends)

        Raises:
            GenerationError: If the output is empty or not a JSON object
        """
        current = next((a for a in catalog if a.guid == article_id), None)
        current_title = current.title if current else UNKNOWN_ARTICLE_TITLE
        current_snippet = current.content_snippet if current else ""

        available = [
            {"id": a.guid, "title": a.title, "snippet": a.content_snippet[:CATALOG_SNIPPET_CHARS]}
            for a in catalog
        ]
        prompt = (
            f"Current article: {current_title}\n{current_snippet}\n\n"
            f"User preferences: {json.dumps(user_preferences or {})}\n\n"
            f"Recently read: {json.dumps(recently_read or [])}\n\n"
            f"Available articles: {json.dumps(available)}"
        )

        text = await self._generate(
            prompt,
            self.RECOMMEND_SYSTEM_PROMPT,
            "Failed to generate recommendations",
            **self.RECOMMEND_PARAMS,
        )
        if not text:
            logger.error(f"Provider {self.provider.name} returned no recommendations")
            raise GenerationError("No recommendations generated")

        recommendations = _parse_json_object(text, "Failed to parse recommendations")

        recommended_ids = recommendations.get("recommendedArticles")
        if not isinstance(recommended_ids, list):
            recommended_ids = []
        wanted = {str(i) for i in recommended_ids}
        articles = [a for a in catalog if a.guid in wanted]
        return recommendations, articles
