"""
eddy/persister.py
-----------------
Commits a reverse keyword map to Redis as one atomic batch.

Each keyword is a Redis list of document paths. Every write of a run is
queued on a single MULTI/EXEC pipeline and sent in one round trip, so a
connection failure leaves the store exactly as it was.

Two strategies share the Persister interface:
    RedisAppendPersister    — blind RPUSH; re-indexing the same documents
                              appends them again (default)
    RedisOverwritePersister — DEL + RPUSH per keyword; re-indexing replaces
                              the lists of the keywords it touches
"""

from abc import ABC, abstractmethod
from typing import Any, List

import redis
from redis.exceptions import RedisError

from eddy.config import Settings
from eddy.errors import ConfigurationError, StoreError
from eddy.keyword_map import DocPath, DocPaths, Keyword, ReverseMap, normalize_keyword
from eddy.logging_config import get_logger

log = get_logger(__name__)


class Persister(ABC):
    """Stores a reverse keyword map and answers keyword lookups."""

    @abstractmethod
    def save(self, reverse_map: ReverseMap) -> int:
        """Commits the whole map atomically; returns the number of entries written."""

    @abstractmethod
    def lookup(self, keyword: Keyword) -> List[DocPath]:
        """Returns the stored documents for a keyword (empty if unknown)."""


class RedisAppendPersister(Persister):
    """Appends every document path to its keyword's list, without reading first."""

    def __init__(self, client: Any):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisAppendPersister":
        """Opens one connection pool for the run from a `redis://` URL."""
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def _queue(self, pipe: Any, keyword: Keyword, doc_paths: DocPaths) -> None:
        pipe.rpush(keyword, *doc_paths)

    def save(self, reverse_map: ReverseMap) -> int:
        if not reverse_map:
            log.info("Reverse keyword map is empty — nothing to persist")
            return 0

        entries = 0
        try:
            pipe = self._client.pipeline(transaction=True)
            for keyword, doc_paths in reverse_map.items():
                if not doc_paths:
                    continue
                self._queue(pipe, keyword, doc_paths)
                entries += len(doc_paths)
            pipe.execute()
        except RedisError as exc:
            log.error("Persisting keyword map failed — %s", exc)
            raise StoreError(f"Could not persist keyword map: {exc}") from exc

        log.info("Persisted %d entries for %d keyword(s)", entries, len(reverse_map))
        return entries

    def lookup(self, keyword: Keyword) -> List[DocPath]:
        try:
            return list(self._client.lrange(normalize_keyword(keyword), 0, -1))
        except RedisError as exc:
            raise StoreError(f"Could not read keyword {keyword!r}: {exc}") from exc


class RedisOverwritePersister(RedisAppendPersister):
    """Replaces each written keyword's list, making re-runs idempotent."""

    def _queue(self, pipe: Any, keyword: Keyword, doc_paths: DocPaths) -> None:
        pipe.delete(keyword)
        pipe.rpush(keyword, *doc_paths)


def build_persister(settings: Settings) -> Persister:
    """Constructs the configured persister (once per run)."""
    persister_cls = (
        RedisOverwritePersister if settings.persist_mode == "overwrite" else RedisAppendPersister
    )
    try:
        return persister_cls.from_url(settings.redis_url)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid REDIS_URL {settings.redis_url!r}: {exc}") from exc
