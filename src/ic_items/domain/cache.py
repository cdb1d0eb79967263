"""Item cache contract — cache-aside over the items table.

Keys:
  - "items"          full listing (newest first, bounded), short TTL
  - "item:{item_id}" single item, longer TTL

Policy:
  - Read: cache-aside (check cache → DB on miss → populate cache)
  - Write: DB first, then cache invalidate (no in-place refresh)
  - UNAVAILABLE is folded into the miss path; the cache never fails a request.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

ITEMS_COLLECTION_KEY = "items"


def item_key(item_id: int) -> str:
    return f"item:{item_id}"


class CacheStatus(str, Enum):
    HIT = "HIT"
    MISS = "MISS"
    UNAVAILABLE = "UNAVAILABLE"


@dataclass(frozen=True)
class CacheLookup:
    status: CacheStatus
    value: str | None = None

    @property
    def is_hit(self) -> bool:
        return self.status is CacheStatus.HIT


MISS = CacheLookup(CacheStatus.MISS)
UNAVAILABLE = CacheLookup(CacheStatus.UNAVAILABLE)


class ItemCacheProtocol(Protocol):
    def is_ready(self) -> bool: ...

    async def get(self, key: str) -> CacheLookup: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool: ...

    async def delete(self, *keys: str) -> bool: ...

    async def ping(self) -> bool: ...
