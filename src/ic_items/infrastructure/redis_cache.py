"""RedisItemCache — concrete implementation of ItemCacheProtocol.

Every call checks ``is_ready()`` first. A connection or timeout error marks
the cache unavailable for ``retry_after`` seconds; during that window reads
report UNAVAILABLE and writes are no-ops without touching the network.
All RedisError and RedisClusterException failures are logged and swallowed
here; an unreachable cluster counts as a connection failure.
"""

import logging
import time
from collections.abc import Callable

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisClusterException, RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from src.ic_common.redis_client import RedisClient
from src.ic_items.domain.cache import (
    MISS,
    UNAVAILABLE,
    CacheLookup,
    CacheStatus,
)

logger = logging.getLogger(__name__)

# The cluster client raises RedisClusterException (not a RedisError) when no
# startup node is reachable
_CACHE_ERRORS = (RedisError, RedisClusterException)


class RedisItemCache:
    def __init__(
        self,
        client: RedisClient,
        retry_after: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._retry_after = retry_after
        self._clock = clock
        self._unavailable_until = 0.0
        self.last_error: str | None = None

    @property
    def client(self) -> RedisClient:
        return self._client

    def is_ready(self) -> bool:
        return self._clock() >= self._unavailable_until

    def mark_unavailable(self) -> None:
        self._unavailable_until = self._clock() + self._retry_after

    def _on_error(self, op: str, key: str, exc: Exception) -> None:
        self.last_error = str(exc)
        if isinstance(exc, (RedisConnectionError, RedisTimeoutError, RedisClusterException)):
            self.mark_unavailable()
            logger.warning(
                "Redis %s failed for %s, cache unavailable for %.1fs: %s",
                op, key, self._retry_after, exc,
            )
        else:
            logger.warning("Redis %s failed for %s: %s", op, key, exc)

    async def get(self, key: str) -> CacheLookup:
        if not self.is_ready():
            return UNAVAILABLE
        try:
            value = await self._client.get(key)
        except _CACHE_ERRORS as exc:
            self._on_error("GET", key, exc)
            return UNAVAILABLE
        if value is None:
            return MISS
        return CacheLookup(CacheStatus.HIT, value)

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        if not self.is_ready():
            return False
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except _CACHE_ERRORS as exc:
            self._on_error("SET", key, exc)
            return False
        return True

    async def delete(self, *keys: str) -> bool:
        # One DEL per key: cluster nodes reject multi-key commands across slots
        ok = True
        for key in keys:
            if not self.is_ready():
                return False
            try:
                await self._client.delete(key)
            except _CACHE_ERRORS as exc:
                self._on_error("DEL", key, exc)
                ok = False
        return ok

    async def ping(self) -> bool:
        """Probe connectivity regardless of readiness; success clears the backoff."""
        try:
            await self._client.ping()
        except _CACHE_ERRORS as exc:
            self._on_error("PING", "-", exc)
            return False
        self._unavailable_until = 0.0
        self.last_error = None
        return True
