"""
Article normalization.

RSS and Atom name the same thing differently, and many feeds omit fields.
Each output field is filled from an ordered chain of source fields; the
first non-empty value wins, otherwise the field's default applies.

    title          <- title                               | "Untitled"
    link           <- link                                | "#"
    pubDate        <- published, updated                  | fetch time (ISO-8601)
    contentSnippet <- text(content), text(summary)        | ""
    guid           <- guid, id, link                      | random token
"""

import uuid
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone

from bs4 import BeautifulSoup

from .models import Article

UNTITLED = "Untitled"
NO_LINK = "#"

FIELD_CHAINS: dict[str, tuple[str, ...]] = {
    "title": ("title",),
    "link": ("link",),
    "pub_date": ("published", "updated"),
    "content_snippet": ("content", "summary", "description"),
    "guid": ("guid", "id", "link"),
}


def html_to_text(value: str) -> str:
    """Reduce an HTML fragment to whitespace-normalized plain text."""
    if "<" not in value and "&" not in value:
        return " ".join(value.split())
    soup = BeautifulSoup(value, "html.parser")
    return soup.get_text(separator=" ", strip=True)


def _source_value(entry: Mapping, key: str) -> str:
    value = entry.get(key)
    # Atom/RSS content arrives as a list of {type, value} blocks
    if isinstance(value, list):
        value = next(
            (block.get("value") for block in value
             if isinstance(block, Mapping) and block.get("value")),
            None,
        )
    if not isinstance(value, str):
        return ""
    return value.strip()


def first_of(entry: Mapping, field: str) -> str:
    """Return the first non-empty source value along ``field``'s chain."""
    for key in FIELD_CHAINS[field]:
        value = _source_value(entry, key)
        if value:
            return value
    return ""


def new_guid() -> str:
    return uuid.uuid4().hex


def normalize_entry(entry: Mapping, fetched_at: datetime | None = None) -> Article:
    """Build an Article from one parsed feed entry."""
    fetched_at = fetched_at or datetime.now(timezone.utc)

    snippet = first_of(entry, "content_snippet")
    return Article(
        title=first_of(entry, "title") or UNTITLED,
        link=first_of(entry, "link") or NO_LINK,
        pub_date=first_of(entry, "pub_date") or fetched_at.isoformat(),
        content_snippet=html_to_text(snippet) if snippet else "",
        guid=first_of(entry, "guid") or new_guid(),
    )


def normalize_entries(entries: Iterable[Mapping]) -> list[Article]:
    """Normalize a batch of entries, stamping missing dates with one fetch time."""
    fetched_at = datetime.now(timezone.utc)
    return [normalize_entry(entry, fetched_at) for entry in entries]
