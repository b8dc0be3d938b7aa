"""
Feed Parser - Fetch and parse RSS/Atom feeds.

Handles:
- RSS 2.0 and Atom 1.0 formats (via feedparser)
- Pre-flight validation of a feed URL
- Article listing with normalized items

Content is downloaded first and parsed second so that an unreachable feed
(FetchError) is reported separately from one that is not a feed (ParseError).
"""

import asyncio
import io
import logging
from dataclasses import dataclass, field
from urllib.parse import urljoin

import aiohttp
import feedparser

from .articles import normalize_entries
from .errors import FetchError, ParseError
from .models import Article, FeedValidation
from .url_validator import guard_outbound_url, is_absolute_url, require_feed_url

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
FEED_ACCEPT = "application/rss+xml, application/atom+xml, application/xml, text/xml;q=0.9, */*;q=0.8"

MAX_REDIRECTS = 5
REDIRECT_STATUSES = {301, 302, 303, 307, 308}


@dataclass
class Download:
    """Raw feed bytes as returned by the server."""
    url: str
    content: bytes
    content_type: str | None = None


@dataclass
class ParsedFeed:
    """Represents a parsed feed."""
    url: str
    title: str | None
    description: str | None
    link: str | None
    entries: list = field(default_factory=list)


class FeedParser:
    """Downloads and parses RSS/Atom feeds."""

    def __init__(
        self,
        timeout: float = 10,
        user_agent: str | None = None,
        block_private_urls: bool = True,
        resolve_dns: bool = True,
    ):
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.block_private_urls = block_private_urls
        self.resolve_dns = resolve_dns

    async def download(self, url: str) -> Download:
        """
        Fetch raw feed content.

        Redirects are followed by hand so every hop passes the outbound
        guard before it is requested.

        Raises:
            FetchError: On connection failure, timeout, a non-2xx status,
                a blocked target, or too many redirects
        """
        headers = {"User-Agent": self.user_agent, "Accept": FEED_ACCEPT}
        try:
            async with aiohttp.ClientSession(headers=headers) as session:
                for _ in range(MAX_REDIRECTS + 1):
                    if self.block_private_urls:
                        guard_outbound_url(url, resolve_dns=self.resolve_dns)

                    async with session.get(
                        url,
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                        allow_redirects=False,
                    ) as resp:
                        location = resp.headers.get("Location")
                        if resp.status in REDIRECT_STATUSES and location:
                            url = urljoin(str(resp.url), location)
                            if not is_absolute_url(url):
                                raise FetchError(f"Redirect to unsupported URL: {url}")
                            logger.debug(f"Following redirect to {url}")
                            continue
                        if resp.status >= 400:
                            raise FetchError(f"HTTP error! status: {resp.status}")
                        content = await resp.read()
                        return Download(
                            url=str(resp.url),
                            content=content,
                            content_type=resp.headers.get("Content-Type"),
                        )
                raise FetchError(f"Too many redirects (more than {MAX_REDIRECTS})")
        except asyncio.TimeoutError as e:
            raise FetchError(f"Timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise FetchError(f"Could not reach feed: {e}") from e

    def parse(self, download: Download) -> ParsedFeed:
        """
        Parse downloaded content with feedparser.

        Raises:
            ParseError: If the content is not RSS/Atom
        """
        response_headers = {}
        if download.content_type:
            response_headers["content-type"] = download.content_type

        # A file-like object keeps feedparser from treating content as a URL or path
        parsed = feedparser.parse(
            io.BytesIO(download.content), response_headers=response_headers
        )

        if not parsed.entries and (parsed.bozo or not parsed.version):
            reason = parsed.get("bozo_exception") or "no RSS or Atom content found"
            raise ParseError(f"Failed to parse feed: {reason}")

        feed_meta = parsed.feed
        return ParsedFeed(
            url=download.url,
            title=feed_meta.get("title"),
            description=feed_meta.get("description") or feed_meta.get("subtitle"),
            link=feed_meta.get("link"),
            entries=list(parsed.entries),
        )

    async def fetch(self, url: str) -> ParsedFeed:
        """Download and parse a feed URL that already passed syntax checks."""
        download = await self.download(url)
        return self.parse(download)

    async def validate(self, url: str | None) -> FeedValidation:
        """
        Pre-flight check before subscribing.

        Single attempt; malformed URLs are rejected before any network access.

        Raises:
            ValidationError: Missing or malformed URL
            FetchError: Feed unreachable
            ParseError: Reachable but not a feed
        """
        url = require_feed_url(url)
        feed = await self.fetch(url)
        return FeedValidation(
            title=feed.title or "Untitled Feed",
            description=feed.description or "",
            link=feed.link or url,
            item_count=len(feed.entries),
        )

    async def fetch_articles(self, url: str | None) -> list[Article]:
        """Fetch a feed and return its items as normalized articles."""
        url = require_feed_url(url)
        feed = await self.fetch(url)
        return normalize_entries(feed.entries)

    async def fetch_many(self, urls: list[str]) -> list[list[Article] | Exception]:
        """
        Fetch several feeds concurrently.

        Returns one article list or Exception per URL, in order.
        """
        tasks = [self.fetch_articles(url) for url in urls]
        return await asyncio.gather(*tasks, return_exceptions=True)
