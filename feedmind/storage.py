"""
Feed storage - durable backing document for the subscription list.

The store talks to an injected ``FeedStorage``; the shipped backend keeps
the whole collection in one JSON file that is read and rewritten wholesale.

Each read returns a version token (a hash of the raw document). Writes name
the version they were based on and fail with ``ConcurrentModification`` if
the document changed in between, so two racing writers cannot silently
drop each other's update.
"""

import hashlib
import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from .errors import ConcurrentModification, StorageUnavailable
from .models import Feed

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    """A full read of the feed collection."""
    feeds: list[Feed]
    version: str


class FeedStorage(ABC):
    """Abstract backing store for the feed collection."""

    @abstractmethod
    def read(self) -> Snapshot:
        """Load the full collection."""
        pass

    @abstractmethod
    def write(self, feeds: list[Feed], expected_version: str | None = None) -> Snapshot:
        """
        Replace the full collection.

        Args:
            feeds: The complete new collection
            expected_version: Version of the snapshot the change was based on;
                None skips the check

        Returns:
            Snapshot of what was written
        """
        pass


def _version_of(raw: bytes) -> str:
    return hashlib.sha256(raw).hexdigest()


def _decode_feeds(raw: bytes) -> list[Feed]:
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("feed document must be a JSON array")
    return [Feed.from_dict(item) for item in data]


def _encode_feeds(feeds: list[Feed]) -> bytes:
    data = [feed.to_dict() for feed in feeds]
    return json.dumps(data, ensure_ascii=False, indent=2).encode("utf-8")


class JsonFileStorage(FeedStorage):
    """Feed collection kept as a JSON array in a single file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.RLock()

    def ensure_exists(self) -> None:
        """Create an empty document if none exists yet."""
        with self._lock:
            if self.path.exists():
                return
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._replace(_encode_feeds([]))
            logger.info(f"Created empty feed document at {self.path}")

    def read(self) -> Snapshot:
        with self._lock:
            try:
                raw = self.path.read_bytes()
            except OSError as e:
                logger.error(f"Cannot read feed document {self.path}: {e}")
                raise StorageUnavailable("Failed to read feeds") from e

        try:
            feeds = _decode_feeds(raw)
        except (ValueError, TypeError, KeyError) as e:
            logger.error(f"Feed document {self.path} is corrupt: {e}")
            raise StorageUnavailable("Failed to parse feeds") from e

        return Snapshot(feeds=feeds, version=_version_of(raw))

    def write(self, feeds: list[Feed], expected_version: str | None = None) -> Snapshot:
        raw = _encode_feeds(feeds)
        with self._lock:
            if expected_version is not None:
                current = self._current_version()
                if current != expected_version:
                    logger.warning(
                        f"Rejected write to {self.path}: based on stale snapshot"
                    )
                    raise ConcurrentModification()
            self._replace(raw)
        return Snapshot(feeds=list(feeds), version=_version_of(raw))

    def _current_version(self) -> str | None:
        try:
            return _version_of(self.path.read_bytes())
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageUnavailable("Failed to read feeds") from e

    def _replace(self, raw: bytes) -> None:
        """Write to a sibling temp file, then atomically rename over the document."""
        directory = self.path.parent
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=directory, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(raw)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(f"Cannot write feed document {self.path}: {e}")
            raise StorageUnavailable("Failed to write feeds") from e
