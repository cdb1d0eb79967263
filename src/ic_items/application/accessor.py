"""CachedItemAccessor — read-through cache with invalidate-on-write.

Reads consult the cache first. HIT returns the cached snapshot; MISS and
UNAVAILABLE both fall through to the database and repopulate the cache.
The database is the only source of truth: its errors propagate, cache
problems never do.

Writes are not performed here. After the service commits a mutation it
calls ``invalidate_one`` / ``invalidate_collection``; entries are deleted,
never rewritten. A reader racing a writer can still see the old entry until
the delete lands or the TTL lapses.
"""

import json
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ic_items.domain.cache import (
    ITEMS_COLLECTION_KEY,
    UNAVAILABLE,
    CacheLookup,
    ItemCacheProtocol,
    item_key,
)
from src.ic_items.domain.models import Item
from src.ic_items.domain.repository import ItemRepositoryProtocol

logger = logging.getLogger(__name__)


class CachedItemAccessor:
    def __init__(
        self,
        repo: ItemRepositoryProtocol,
        cache: ItemCacheProtocol,
        list_ttl: int = 60,
        item_ttl: int = 300,
        list_limit: int = 100,
    ) -> None:
        self._repo = repo
        self._cache = cache
        self._list_ttl = list_ttl
        self._item_ttl = item_ttl
        self._list_limit = list_limit

    async def _lookup(self, key: str) -> CacheLookup:
        if not self._cache.is_ready():
            logger.debug("Cache not ready, bypassing for %s", key)
            return UNAVAILABLE
        return await self._cache.get(key)

    async def _store(self, key: str, payload: str, ttl: int) -> None:
        if self._cache.is_ready():
            await self._cache.set(key, payload, ttl)

    async def fetch_collection(self, db: AsyncSession) -> list[Item]:
        lookup = await self._lookup(ITEMS_COLLECTION_KEY)
        if lookup.is_hit:
            try:
                items = [Item.from_dict(d) for d in json.loads(lookup.value)]  # type: ignore[arg-type]
            except (ValueError, TypeError, KeyError) as exc:
                logger.warning("Discarding corrupt cache entry %s: %s", ITEMS_COLLECTION_KEY, exc)
            else:
                logger.debug("Returning items from cache")
                return items[: self._list_limit]
        else:
            logger.debug("Cache %s for %s", lookup.status.value, ITEMS_COLLECTION_KEY)

        items = await self._repo.list_items(db, self._list_limit)
        payload = json.dumps([item.to_dict() for item in items])
        await self._store(ITEMS_COLLECTION_KEY, payload, self._list_ttl)
        return items

    async def fetch_one(self, db: AsyncSession, item_id: int) -> Item | None:
        key = item_key(item_id)
        lookup = await self._lookup(key)
        if lookup.is_hit:
            try:
                item = Item.from_dict(json.loads(lookup.value))  # type: ignore[arg-type]
            except (ValueError, TypeError, KeyError) as exc:
                logger.warning("Discarding corrupt cache entry %s: %s", key, exc)
            else:
                logger.debug("Returning item %s from cache", item_id)
                return item
        else:
            logger.debug("Cache %s for %s", lookup.status.value, key)

        item = await self._repo.get_item(db, item_id)
        if item is None:
            return None
        await self._store(key, json.dumps(item.to_dict()), self._item_ttl)
        return item

    async def invalidate_one(self, item_id: int) -> None:
        if self._cache.is_ready():
            await self._cache.delete(item_key(item_id))

    async def invalidate_collection(self) -> None:
        if self._cache.is_ready():
            await self._cache.delete(ITEMS_COLLECTION_KEY)
