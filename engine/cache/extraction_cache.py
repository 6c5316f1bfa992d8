"""Extraction Cache - Content-addressed store for structured job requirements."""
import json
import logging
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple
from urllib.parse import urlparse

from redis import Redis

from engine.utils import ContentFingerprinter

logger = logging.getLogger(__name__)

# 1 day in seconds
CACHE_TTL_SECONDS = 24 * 60 * 60


def make_cache_key(job_description: str) -> str:
    """Content address for a job description."""
    return ContentFingerprinter.calculate(job_description)


def _sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    try:
        parsed = urlparse(url)
        if parsed.password:
            sanitized = parsed._replace(
                netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
            )
            return sanitized.geturl()
        return url
    except ValueError:
        return url


class ExtractionCache(ABC):
    """
    Key -> extracted-data store injected into requirement extractors.

    Values are JSON-compatible dicts.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def set(self, key: str, value: Dict[str, Any], ttl_seconds: Optional[int] = None) -> bool:
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        pass


class InMemoryExtractionCache(ExtractionCache):
    """
    Bounded LRU cache with per-entry TTL, owned by whoever builds it.
    """

    def __init__(
        self,
        max_entries: int = 256,
        ttl_seconds: int = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, Dict[str, Any]]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"Cache miss for {key[:16]}...")
            return None

        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            logger.debug(f"Cache entry expired for {key[:16]}...")
            return None

        self._entries.move_to_end(key)
        logger.debug(f"Cache hit for {key[:16]}...")
        return json.loads(json.dumps(value))

    def set(self, key: str, value: Dict[str, Any], ttl_seconds: Optional[int] = None) -> bool:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        # Stored as a detached copy so callers cannot mutate cached data
        self._entries[key] = (self._clock() + ttl, json.loads(json.dumps(value)))
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted {evicted[:16]}... from extraction cache")
        return True

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()


class RedisExtractionCache(ExtractionCache):
    """
    Redis-backed extraction cache shared between processes.

    Entries expire via SETEX. An unreachable Redis degrades to cache misses.
    """

    KEY_PREFIX = "jd-extraction:"

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        password: Optional[str] = None,
        ttl_seconds: int = CACHE_TTL_SECONDS,
        client: Optional[Redis] = None
    ):
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self._redis: Optional[Redis] = None
        self._available = False

        try:
            self._redis = client or Redis.from_url(
                redis_url,
                password=password,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5
            )
            self._redis.ping()
            self._available = True
            logger.info(f"Extraction cache connected to Redis at {_sanitize_url(redis_url)}")
        except Exception as e:
            logger.warning(f"Extraction cache Redis unavailable: {e}")
            self._redis = None
            self._available = False

    @property
    def is_available(self) -> bool:
        return self._available and self._redis is not None

    def _make_key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}{key}"

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        if not self.is_available:
            return None

        try:
            data = self._redis.get(self._make_key(key))
            if data:
                logger.debug(f"Cache hit for {key[:16]}...")
                return json.loads(data).get("data")
            logger.debug(f"Cache miss for {key[:16]}...")
            return None
        except Exception as e:
            logger.warning(f"Error reading from extraction cache: {e}")
            return None

    def set(self, key: str, value: Dict[str, Any], ttl_seconds: Optional[int] = None) -> bool:
        if not self.is_available:
            return False

        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            # SETEX rejects non-positive expiries; a zero TTL means "do not cache"
            return False

        try:
            cache_entry = {
                "data": value,
                "cached_at": datetime.now(timezone.utc).isoformat(),
                "ttl_seconds": ttl
            }
            self._redis.setex(self._make_key(key), ttl, json.dumps(cache_entry))
            logger.debug(f"Cached extraction {key[:16]}... (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.warning(f"Error writing to extraction cache: {e}")
            return False

    def delete(self, key: str) -> bool:
        if not self.is_available:
            return False

        try:
            self._redis.delete(self._make_key(key))
            return True
        except Exception as e:
            logger.warning(f"Error deleting from extraction cache: {e}")
            return False
