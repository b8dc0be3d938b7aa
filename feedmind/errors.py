"""
Error taxonomy shared by the store, the feed collaborators and the API.

Every error carries the HTTP status it maps to at the API boundary, so
routes can let them propagate and the application-level handler turns
them into ``{"detail": ...}`` responses.
"""


class FeedMindError(Exception):
    """Base class for all expected, user-facing failures."""

    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"detail": self.message}


class ValidationError(FeedMindError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Invalid input"


class NotFound(FeedMindError):
    status_code = 404
    default_message = "Feed not found"


class DuplicateFeed(FeedMindError):
    status_code = 409
    default_message = "Feed already exists"


class ConcurrentModification(FeedMindError):
    """The feed document changed between read and write."""

    status_code = 409
    default_message = "Feed list was modified concurrently, please retry"


class FetchError(FeedMindError):
    """Upstream feed could not be retrieved."""

    status_code = 500
    default_message = "Failed to fetch feed"


class ParseError(FeedMindError):
    """Upstream content was retrieved but is not RSS/Atom."""

    status_code = 500
    default_message = "Could not parse feed"


class InvalidFeed(FeedMindError):
    """Validation verdict: the URL does not lead to a usable feed."""

    status_code = 422
    default_message = (
        "Could not parse RSS feed from this URL. Please check the URL and try again."
    )

    def __init__(self, reason: str, message: str | None = None):
        super().__init__(message)
        self.reason = reason

    def to_body(self) -> dict:
        return {"detail": self.message, "reason": self.reason, "isValid": False}


class GenerationError(FeedMindError):
    """Text-generation provider returned nothing usable."""

    status_code = 500
    default_message = "Text generation failed"


class StorageUnavailable(FeedMindError):
    status_code = 500
    default_message = "Feed storage unavailable"


class ProviderUnavailable(FeedMindError):
    """No text-generation provider is configured."""

    status_code = 503
    default_message = "AI features not configured"


def require_text(value: str | None, detail: str) -> str:
    """
    Return the stripped value, raising ValidationError when empty.

    Usage:
        title = require_text(request.title, "Title is required")
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(detail)
    return value.strip()
