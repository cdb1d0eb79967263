"""Shared test fixtures.

InMemoryItemRepository and FakeItemCache satisfy the ItemRepositoryProtocol
and ItemCacheProtocol contracts so the cache-aside flow can be exercised end
to end without PostgreSQL or Redis.
"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.ic_common.database import get_db_session
from src.ic_items.api.dependencies import get_item_service
from src.ic_items.application.accessor import CachedItemAccessor
from src.ic_items.application.service import ItemApplicationService
from src.ic_items.domain.cache import MISS, UNAVAILABLE, CacheLookup, CacheStatus
from src.ic_items.domain.models import Item
from src.main import app

_EPOCH = datetime(2026, 1, 1, tzinfo=UTC)


class InMemoryItemRepository:
    """Dict-backed repository; each write advances a fake clock by one second."""

    def __init__(self) -> None:
        self.rows: dict[int, Item] = {}
        self.calls: list[str] = []
        self.fail_with: Exception | None = None
        self._next_id = 1
        self._tick = 0

    def _now(self) -> datetime:
        self._tick += 1
        return _EPOCH + timedelta(seconds=self._tick)

    def _check(self, op: str) -> None:
        self.calls.append(op)
        if self.fail_with is not None:
            raise self.fail_with

    def _copy(self, item: Item) -> Item:
        return Item(item.id, item.name, item.description, item.created_at, item.updated_at)

    async def list_items(self, db, limit: int) -> list[Item]:
        self._check("list_items")
        ordered = sorted(
            self.rows.values(), key=lambda i: (i.created_at, i.id), reverse=True
        )
        return [self._copy(i) for i in ordered[:limit]]

    async def get_item(self, db, item_id: int) -> Item | None:
        self._check("get_item")
        item = self.rows.get(item_id)
        return self._copy(item) if item else None

    async def lock_item(self, db, item_id: int) -> Item | None:
        self._check("lock_item")
        item = self.rows.get(item_id)
        return self._copy(item) if item else None

    async def create_item(self, db, name: str, description: str) -> Item:
        self._check("create_item")
        now = self._now()
        item = Item(self._next_id, name, description, now, now)
        self.rows[item.id] = item
        self._next_id += 1
        return self._copy(item)

    async def update_item(self, db, item_id: int, name: str, description: str | None) -> Item | None:
        self._check("update_item")
        item = self.rows.get(item_id)
        if item is None:
            return None
        item.name = name
        item.description = description
        item.updated_at = self._now()
        return self._copy(item)

    async def delete_item(self, db, item_id: int) -> bool:
        self._check("delete_item")
        return self.rows.pop(item_id, None) is not None


class FakeItemCache:
    """Expiry-free key/value cache with a switchable readiness flag."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.ready = True
        self.last_error: str | None = None
        self.gets = 0
        self.sets = 0
        self.deletes: list[str] = []

    def is_ready(self) -> bool:
        return self.ready

    async def get(self, key: str) -> CacheLookup:
        self.gets += 1
        if not self.ready:
            return UNAVAILABLE
        if key not in self.store:
            return MISS
        return CacheLookup(CacheStatus.HIT, self.store[key])

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        if not self.ready:
            return False
        self.sets += 1
        self.store[key] = value
        self.ttls[key] = ttl_seconds
        return True

    async def delete(self, *keys: str) -> bool:
        if not self.ready:
            return False
        for key in keys:
            self.deletes.append(key)
            self.store.pop(key, None)
            self.ttls.pop(key, None)
        return True

    async def ping(self) -> bool:
        return self.ready


@pytest.fixture
def repo() -> InMemoryItemRepository:
    return InMemoryItemRepository()


@pytest.fixture
def cache() -> FakeItemCache:
    return FakeItemCache()


@pytest.fixture
def accessor(repo: InMemoryItemRepository, cache: FakeItemCache) -> CachedItemAccessor:
    return CachedItemAccessor(repo, cache, list_ttl=60, item_ttl=300, list_limit=100)


@pytest.fixture
def service(
    repo: InMemoryItemRepository, accessor: CachedItemAccessor
) -> ItemApplicationService:
    return ItemApplicationService(repo, accessor)


@pytest.fixture
def db() -> MagicMock:
    session = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
async def client(
    service: ItemApplicationService, db: MagicMock
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client with the item service and DB session overridden."""

    async def _db() -> AsyncGenerator[MagicMock, None]:
        yield db

    app.dependency_overrides[get_item_service] = lambda: service
    app.dependency_overrides[get_db_session] = _db
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
