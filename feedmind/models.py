"""
Domain models - dataclasses for feeds and articles.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Feed:
    url: str
    title: str

    @classmethod
    def from_dict(cls, data: dict) -> "Feed":
        url = data["url"]
        title = data["title"]
        if not isinstance(url, str) or not isinstance(title, str):
            raise TypeError("feed url and title must be strings")
        return cls(url=url, title=title)

    def to_dict(self) -> dict:
        return {"url": self.url, "title": self.title}


@dataclass
class Article:
    """One normalized feed entry. Never persisted."""
    title: str
    link: str
    pub_date: str
    content_snippet: str
    guid: str


@dataclass
class FeedValidation:
    """Metadata returned by a successful feed validation."""
    title: str
    description: str
    link: str
    item_count: int
    is_valid: bool = True
