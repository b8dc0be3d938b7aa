"""
Feed store: CRUD over the subscription list.

Uniqueness of ``url`` is checked against the snapshot that the mutation is
based on; the write is rejected if the document changed since that read.
"""

import logging

from .errors import DuplicateFeed, NotFound, require_text
from .models import Feed
from .storage import FeedStorage
from .url_validator import require_feed_url

logger = logging.getLogger(__name__)


class FeedStore:
    """Subscription list backed by a ``FeedStorage``."""

    def __init__(self, storage: FeedStorage):
        self.storage = storage

    def list_feeds(self) -> list[Feed]:
        """Return every subscribed feed, in insertion order."""
        return self.storage.read().feeds

    def add_feed(self, url: str | None, title: str | None) -> Feed:
        """
        Subscribe to a feed.

        Args:
            url: Absolute http(s) URL of the feed
            title: Display title

        Returns:
            The stored feed

        Raises:
            ValidationError: If url or title is missing, or url is malformed
            DuplicateFeed: If a feed with the same url already exists
            ConcurrentModification: If the list changed during the update
        """
        require_text(url, "URL and title are required")
        title = require_text(title, "URL and title are required")
        url = require_feed_url(url)

        snapshot = self.storage.read()
        if any(existing.url == url for existing in snapshot.feeds):
            raise DuplicateFeed("Feed already exists")

        feed = Feed(url=url, title=title)
        self.storage.write(snapshot.feeds + [feed], expected_version=snapshot.version)
        logger.info(f"Added feed {url}")
        return feed

    def remove_feed(self, url: str | None) -> Feed:
        """
        Unsubscribe from a feed.

        Returns:
            The removed feed

        Raises:
            ValidationError: If url is missing
            NotFound: If no feed has this url
        """
        url = require_text(url, "URL is required")

        snapshot = self.storage.read()
        for index, existing in enumerate(snapshot.feeds):
            if existing.url == url:
                break
        else:
            raise NotFound("Feed not found")

        remaining = snapshot.feeds[:index] + snapshot.feeds[index + 1:]
        self.storage.write(remaining, expected_version=snapshot.version)
        logger.info(f"Removed feed {url}")
        return existing
