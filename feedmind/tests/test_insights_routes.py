"""
Tests for AI routes: /summary, /analyze, /recommend.
"""

import json

from feedmind.config import state
from feedmind.errors import FetchError
from feedmind.feeds import Download

from .samples import RSS_SAMPLE, fake_download


ARTICLES = [
    {
        "title": "Rust 2.0 released",
        "link": "https://example.com/rust",
        "pubDate": "Mon, 06 Jan 2025 10:00:00 GMT",
        "contentSnippet": "The language ships a new edition",
        "guid": "rust",
    },
    {
        "title": "Python 3.14 beta",
        "link": "https://example.com/python",
        "pubDate": "Tue, 07 Jan 2025 10:00:00 GMT",
        "contentSnippet": "Free-threading is now default",
        "guid": "python",
    },
]


class TestSummary:
    """Tests for POST /summary endpoint."""

    def test_requires_provider(self, client):
        response = client.post("/summary", json={"title": "T"})
        assert response.status_code == 503

    def test_missing_title(self, ai_client):
        client, provider = ai_client
        response = client.post("/summary", json={"contentSnippet": "Body"})
        assert response.status_code == 400
        assert provider.calls == []

    def test_missing_title_checked_before_provider(self, client):
        response = client.post("/summary", json={})
        assert response.status_code == 400

    def test_non_string_title(self, ai_client):
        client, _ = ai_client
        response = client.post("/summary", json={"title": 42})
        assert response.status_code == 400

    def test_returns_summary(self, ai_client):
        client, provider = ai_client
        provider.queue_response("A friendly summary.")
        response = client.post(
            "/summary", json={"title": "T", "contentSnippet": "Body"}
        )
        assert response.status_code == 200
        assert response.json() == {"summary": "A friendly summary."}
        assert "Body" in provider.calls[0]["user_prompt"]

    def test_empty_generation_is_500(self, ai_client):
        client, _ = ai_client
        response = client.post("/summary", json={"title": "T"})
        assert response.status_code == 500
        assert response.json()["detail"] == "No summary generated"

    def test_provider_error_is_generation_error(self, ai_client):
        client, provider = ai_client
        provider.fail_with(RuntimeError("429 rate limited"))
        response = client.post("/summary", json={"title": "T"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to generate summary"


class TestAnalyze:
    """Tests for POST /analyze endpoint."""

    def test_requires_provider(self, client):
        response = client.post("/analyze", json={"title": "T"})
        assert response.status_code == 503

    def test_missing_title(self, ai_client):
        client, _ = ai_client
        response = client.post("/analyze", json={"title": "  "})
        assert response.status_code == 400

    def test_returns_camel_case_analysis(self, ai_client):
        client, provider = ai_client
        provider.queue_response(json.dumps({
            "categories": ["Tech"],
            "sentiment": "positive",
            "keywords": ["rust"],
            "readingTimeMinutes": 3,
        }))
        response = client.post("/analyze", json={"title": "Rust 2.0 released"})
        assert response.status_code == 200
        assert response.json() == {
            "categories": ["Tech"],
            "sentiment": "positive",
            "keywords": ["rust"],
            "readingTimeMinutes": 3,
        }

    def test_unparseable_output_is_500(self, ai_client):
        client, provider = ai_client
        provider.queue_response("not json")
        response = client.post("/analyze", json={"title": "T"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to parse analysis"

    def test_empty_object_is_500(self, ai_client):
        client, provider = ai_client
        provider.queue_response("{}")
        response = client.post("/analyze", json={"title": "T"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to parse analysis"

    def test_provider_error_is_generation_error(self, ai_client):
        client, provider = ai_client
        provider.fail_with(ConnectionError("connection refused"))
        response = client.post("/analyze", json={"title": "T"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to analyze article"


class TestRecommend:
    """Tests for POST /recommend endpoint."""

    def test_requires_provider(self, client):
        response = client.post("/recommend", json={"articleId": "rust"})
        assert response.status_code == 503

    def test_missing_article_id(self, ai_client):
        client, provider = ai_client
        response = client.post("/recommend", json={"userPreferences": {}})
        assert response.status_code == 400
        assert provider.calls == []

    def test_recommends_from_request_catalog(self, ai_client):
        client, provider = ai_client
        provider.queue_response(json.dumps({
            "recommendedArticles": ["python"],
            "explanations": {"python": "Another language release"},
        }))
        response = client.post("/recommend", json={
            "articleId": "rust",
            "userPreferences": {"topics": ["programming"]},
            "recentlyRead": [],
            "articles": ARTICLES,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["recommendations"]["recommendedArticles"] == ["python"]
        assert data["articles"] == [ARTICLES[1]]
        assert "Current article: Rust 2.0 released" in provider.calls[0]["user_prompt"]

    def test_numeric_article_id(self, ai_client):
        client, provider = ai_client
        provider.queue_response('{"recommendedArticles": []}')
        response = client.post("/recommend", json={"articleId": 7, "articles": ARTICLES})
        assert response.status_code == 200
        assert "Unknown Article" in provider.calls[0]["user_prompt"]

    def test_catalog_from_subscribed_feeds(self, ai_client):
        client, provider = ai_client
        client.post("/feeds", json={"url": "https://example.com/feed.xml", "title": "Example"})
        state.feed_parser.download = fake_download(RSS_SAMPLE)
        provider.queue_response('{"recommendedArticles": ["https://example.com/second"]}')

        response = client.post("/recommend", json={"articleId": "urn:example:first"})

        assert response.status_code == 200
        data = response.json()
        assert [a["title"] for a in data["articles"]] == ["Second post"]
        assert "Current article: First post" in provider.calls[0]["user_prompt"]

    def test_failing_feeds_left_out_of_catalog(self, ai_client):
        client, provider = ai_client
        client.post("/feeds", json={"url": "https://bad.example.com/rss", "title": "Bad"})
        client.post("/feeds", json={"url": "https://example.com/feed.xml", "title": "Good"})

        async def download(url):
            if "bad" in url:
                raise FetchError("HTTP error! status: 500")
            return Download(url=url, content=RSS_SAMPLE, content_type="application/xml")

        state.feed_parser.download = download
        provider.queue_response('{"recommendedArticles": ["urn:example:first"]}')

        response = client.post("/recommend", json={"articleId": "x"})
        assert response.status_code == 200
        assert [a["guid"] for a in response.json()["articles"]] == ["urn:example:first"]

    def test_no_feeds_empty_catalog(self, ai_client):
        client, provider = ai_client
        provider.queue_response('{"recommendedArticles": []}')
        response = client.post("/recommend", json={"articleId": "x"})
        assert response.status_code == 200
        assert response.json()["articles"] == []
        assert "Available articles: []" in provider.calls[0]["user_prompt"]

    def test_empty_generation_is_500(self, ai_client):
        client, _ = ai_client
        response = client.post("/recommend", json={"articleId": "rust", "articles": ARTICLES})
        assert response.status_code == 500
        assert response.json()["detail"] == "No recommendations generated"
