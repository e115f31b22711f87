"""Read-through resource caching: Redis backend plus the caching provider."""

from __future__ import annotations

import json
import logging
from typing import Any

import redis

from qfmatch.core.exceptions import DataProviderError
from qfmatch.core.protocols import ICacheBackend, IDataProvider

logger = logging.getLogger(__name__)


class RedisCacheBackend:
    """Production ICacheBackend backed by Redis."""

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0) -> None:
        self._client = redis.Redis(host=host, port=port, db=db, decode_responses=True)

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(key)
        except redis.RedisError as exc:
            raise DataProviderError(f"Redis GET failed for key={key!r}: {exc}") from exc

    def setex(self, key: str, ttl: int, value: str) -> None:
        try:
            self._client.setex(key, ttl, value)
        except redis.RedisError as exc:
            raise DataProviderError(f"Redis SETEX failed for key={key!r}: {exc}") from exc


class CachedDataProvider:
    """IDataProvider that memoizes another provider's JSON in a cache.

    Only successful loads are cached; a missing resource is re-checked on
    every call so newly published files are picked up.
    """

    KEY_PREFIX = "data:"

    def __init__(self, inner: IDataProvider, cache: ICacheBackend, ttl: int = 60) -> None:
        self._inner = inner
        self._cache = cache
        self._ttl = ttl

    def load(self, description: str, path: str) -> Any:
        key = f"{self.KEY_PREFIX}{path}"
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("cache hit for %s", path)
            return json.loads(cached)

        data = self._inner.load(description, path)
        self._cache.setex(key, self._ttl, json.dumps(data))
        return data
