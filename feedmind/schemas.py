"""
Pydantic models for API request/response validation.

Wire format is camelCase (``contentSnippet``, ``isValid``); Python code
uses snake_case field names. Request fields the handlers check themselves
are optional so a missing value is reported as a 400 with a clear message.
"""

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from .models import Article, Feed, FeedValidation


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─────────────────────────────────────────────────────────────
# Feed Schemas
# ─────────────────────────────────────────────────────────────

class FeedResponse(CamelModel):
    url: str
    title: str

    @classmethod
    def from_model(cls, feed: Feed) -> "FeedResponse":
        return cls(url=feed.url, title=feed.title)


class AddFeedRequest(CamelModel):
    url: str | None = None
    title: str | None = None


class RemoveFeedRequest(CamelModel):
    url: str | None = None


class ValidateFeedRequest(CamelModel):
    url: str | None = None


class FeedValidationResponse(CamelModel):
    title: str
    description: str
    link: str
    items: int
    is_valid: bool = True

    @classmethod
    def from_model(cls, result: FeedValidation) -> "FeedValidationResponse":
        return cls(
            title=result.title,
            description=result.description,
            link=result.link,
            items=result.item_count,
            is_valid=result.is_valid,
        )


class OPMLImportRequest(CamelModel):
    opml_content: str


class OPMLImportResult(CamelModel):
    """Outcome for one feed in an OPML import."""
    url: str
    title: str | None = None
    success: bool
    error: str | None = None


class OPMLImportResponse(CamelModel):
    total: int
    imported: int
    skipped: int
    failed: int
    results: list[OPMLImportResult]


# ─────────────────────────────────────────────────────────────
# Article Schemas
# ─────────────────────────────────────────────────────────────

class ArticleResponse(CamelModel):
    title: str
    link: str
    pub_date: str
    content_snippet: str
    guid: str

    @classmethod
    def from_model(cls, article: Article) -> "ArticleResponse":
        return cls(
            title=article.title,
            link=article.link,
            pub_date=article.pub_date,
            content_snippet=article.content_snippet,
            guid=article.guid,
        )

    def to_model(self) -> Article:
        return Article(
            title=self.title,
            link=self.link,
            pub_date=self.pub_date,
            content_snippet=self.content_snippet,
            guid=self.guid,
        )


# ─────────────────────────────────────────────────────────────
# AI Schemas
# ─────────────────────────────────────────────────────────────

class ArticleTextRequest(CamelModel):
    """Body of /summary and /analyze."""
    title: str | None = None
    content_snippet: str | None = None


class SummaryResponse(CamelModel):
    summary: str


class RecommendRequest(CamelModel):
    article_id: str | None = None
    user_preferences: dict | None = None
    recently_read: list[str] | None = None
    # Candidate catalog; when omitted, subscribed feeds are fetched
    articles: list[ArticleResponse] | None = None

    @field_validator("article_id", mode="before")
    @classmethod
    def _id_as_string(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class RecommendResponse(CamelModel):
    recommendations: dict
    articles: list[ArticleResponse]
