"""
Tests for feed routes.
"""

import json
from unittest.mock import AsyncMock

from feedmind.config import state
from feedmind.errors import FetchError

from .samples import NOT_A_FEED, RSS_SAMPLE, fake_download

FEED = {"url": "https://example.com/feed.xml", "title": "Example"}


class TestListFeeds:
    """Tests for GET /feeds endpoint."""

    def test_list_feeds_empty(self, client):
        response = client.get("/feeds")
        assert response.status_code == 200
        assert response.json() == []

    def test_list_feeds_after_add(self, client):
        client.post("/feeds", json=FEED)
        response = client.get("/feeds")
        assert response.status_code == 200
        assert response.json() == [FEED]

    def test_list_feeds_storage_failure(self, client, feeds_path):
        feeds_path.write_text("{broken")
        response = client.get("/feeds")
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to parse feeds"


class TestAddFeed:
    """Tests for POST /feeds endpoint."""

    def test_add_feed_created(self, client):
        response = client.post("/feeds", json=FEED)
        assert response.status_code == 201
        assert response.json() == FEED

    def test_add_feed_writes_document(self, client, feeds_path):
        client.post("/feeds", json=FEED)
        assert json.loads(feeds_path.read_text()) == [FEED]

    def test_add_feed_duplicate(self, client):
        client.post("/feeds", json=FEED)
        response = client.post("/feeds", json=FEED)
        assert response.status_code == 409
        assert client.get("/feeds").json() == [FEED]

    def test_add_feed_missing_title(self, client):
        response = client.post("/feeds", json={"url": FEED["url"]})
        assert response.status_code == 400
        assert "required" in response.json()["detail"]

    def test_add_feed_missing_body_fields(self, client):
        response = client.post("/feeds", json={})
        assert response.status_code == 400

    def test_add_feed_invalid_url(self, client):
        response = client.post("/feeds", json={"url": "not a url", "title": "X"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid URL format"

    def test_add_feed_wrong_type(self, client):
        response = client.post("/feeds", json={"url": ["x"], "title": "X"})
        assert response.status_code == 400

    def test_add_feed_not_json(self, client):
        response = client.post(
            "/feeds", content="url=x", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400

    def test_add_feed_does_not_fetch(self, client):
        """Subscribing stores the entry without contacting the feed."""
        state.feed_parser.download = AsyncMock()
        client.post("/feeds", json=FEED)
        state.feed_parser.download.assert_not_awaited()


class TestRemoveFeed:
    """Tests for DELETE /feeds endpoint."""

    def test_remove_feed(self, client):
        client.post("/feeds", json=FEED)
        response = client.request("DELETE", "/feeds", json={"url": FEED["url"]})
        assert response.status_code == 200
        assert response.json() == FEED
        assert client.get("/feeds").json() == []

    def test_remove_feed_not_found(self, client):
        response = client.request("DELETE", "/feeds", json={"url": FEED["url"]})
        assert response.status_code == 404

    def test_remove_feed_missing_url(self, client):
        response = client.request("DELETE", "/feeds", json={})
        assert response.status_code == 400

    def test_remove_twice(self, client):
        client.post("/feeds", json=FEED)
        client.request("DELETE", "/feeds", json={"url": FEED["url"]})
        response = client.request("DELETE", "/feeds", json={"url": FEED["url"]})
        assert response.status_code == 404


class TestValidateFeed:
    """Tests for POST /validate-feed endpoint."""

    def test_validate_valid_feed(self, client):
        state.feed_parser.download = fake_download(RSS_SAMPLE)
        response = client.post("/validate-feed", json={"url": FEED["url"]})
        assert response.status_code == 200
        assert response.json() == {
            "title": "Example Feed",
            "description": "An example RSS feed",
            "link": "https://example.com/",
            "items": 2,
            "isValid": True,
        }

    def test_validate_missing_url(self, client):
        response = client.post("/validate-feed", json={})
        assert response.status_code == 400

    def test_validate_malformed_url_no_network(self, client):
        state.feed_parser.download = AsyncMock()
        response = client.post("/validate-feed", json={"url": "not a url"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid URL format"
        state.feed_parser.download.assert_not_awaited()

    def test_validate_not_a_feed(self, client):
        state.feed_parser.download = fake_download(NOT_A_FEED)
        response = client.post("/validate-feed", json={"url": FEED["url"]})
        assert response.status_code == 422
        body = response.json()
        assert body["isValid"] is False
        assert "Could not parse RSS feed" in body["detail"]

    def test_validate_unreachable(self, client):
        state.feed_parser.download = AsyncMock(side_effect=FetchError("HTTP error! status: 404"))
        response = client.post("/validate-feed", json={"url": FEED["url"]})
        assert response.status_code == 422
        body = response.json()
        assert body["isValid"] is False
        assert body["reason"] == "HTTP error! status: 404"


class TestOPML:
    """Tests for OPML import/export."""

    OPML = """<?xml version="1.0" encoding="UTF-8"?>
    <opml version="2.0">
        <head><title>Mine</title></head>
        <body>
            <outline text="Example" title="Example" type="rss" xmlUrl="https://example.com/feed.xml"/>
            <outline text="Tech">
                <outline text="Other" type="rss" xmlUrl="https://other.example.com/rss"/>
                <outline text="Broken" type="rss" xmlUrl="not a url"/>
            </outline>
        </body>
    </opml>"""

    def test_export_empty(self, client):
        response = client.get("/feeds/export-opml")
        assert response.status_code == 200
        data = response.json()
        assert data["feed_count"] == 0
        assert data["opml"].startswith("<?xml")

    def test_export_with_feeds(self, client):
        client.post("/feeds", json=FEED)
        data = client.get("/feeds/export-opml").json()
        assert data["feed_count"] == 1
        assert 'xmlUrl="https://example.com/feed.xml"' in data["opml"]

    def test_import(self, client):
        client.post("/feeds", json=FEED)
        response = client.post("/feeds/import-opml", json={"opml_content": self.OPML})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["imported"] == 1
        assert data["skipped"] == 1
        assert data["failed"] == 1

        urls = [f["url"] for f in client.get("/feeds").json()]
        assert urls == ["https://example.com/feed.xml", "https://other.example.com/rss"]

    def test_export_reimports_as_skipped(self, client):
        client.post("/feeds", json=FEED)
        client.post("/feeds", json={"url": "https://other.example.com/rss", "title": "Other"})
        opml = client.get("/feeds/export-opml").json()["opml"]

        data = client.post("/feeds/import-opml", json={"opml_content": opml}).json()
        assert data["skipped"] == 2
        assert data["imported"] == 0

    def test_import_invalid_xml(self, client):
        response = client.post("/feeds/import-opml", json={"opml_content": "not valid xml"})
        assert response.status_code == 400

    def test_import_no_feeds(self, client):
        opml = '<opml version="2.0"><head/><body></body></opml>'
        response = client.post("/feeds/import-opml", json={"opml_content": opml})
        assert response.status_code == 400
        assert "No feeds found" in response.json()["detail"]
