"""
Pytest fixtures for FeedMind tests.
"""

import pytest
from fastapi.testclient import TestClient

from feedmind.config import state
from feedmind.feed_store import FeedStore
from feedmind.feeds import FeedParser
from feedmind.insights import ArticleInsights
from feedmind.server import app
from feedmind.storage import JsonFileStorage

from .samples import MockProvider


@pytest.fixture
def feeds_path(tmp_path):
    """Path to an empty feed document."""
    path = tmp_path / "feeds.json"
    path.write_text("[]")
    return path


@pytest.fixture
def storage(feeds_path):
    return JsonFileStorage(feeds_path)


@pytest.fixture
def store(storage):
    return FeedStore(storage)


@pytest.fixture
def feed_parser():
    """Parser that never resolves DNS; tests replace download() as needed."""
    return FeedParser(timeout=1, resolve_dns=False)


@pytest.fixture
def mock_provider():
    return MockProvider()


@pytest.fixture
def client(store, feed_parser):
    """Test client with an isolated feed document and AI disabled."""
    original = (state.store, state.feed_parser, state.provider, state.insights)

    state.store = store
    state.feed_parser = feed_parser
    state.provider = None
    state.insights = None

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    state.store, state.feed_parser, state.provider, state.insights = original


@pytest.fixture
def ai_client(client, mock_provider):
    """Test client with the mock LLM provider installed."""
    state.provider = mock_provider
    state.insights = ArticleInsights(provider=mock_provider)
    yield client, mock_provider
