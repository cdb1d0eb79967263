"""ItemApplicationService — thin composition layer.

Reads go through CachedItemAccessor. Mutations run against the database,
commit, and only then invalidate the affected cache keys; on any database
error the session is rolled back and the error propagates untouched.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ic_common.errors import ItemNotFoundError
from src.ic_items.application.accessor import CachedItemAccessor
from src.ic_items.application.schemas import (
    ItemCreateRequest,
    ItemListResponse,
    ItemResponse,
    ItemUpdateRequest,
)
from src.ic_items.domain.repository import ItemRepositoryProtocol

logger = logging.getLogger(__name__)


class ItemApplicationService:
    def __init__(
        self, repo: ItemRepositoryProtocol, accessor: CachedItemAccessor
    ) -> None:
        self._repo = repo
        self._accessor = accessor

    async def list_items(self, db: AsyncSession) -> ItemListResponse:
        items = await self._accessor.fetch_collection(db)
        return ItemListResponse(
            items=[ItemResponse.from_domain(i) for i in items],
            count=len(items),
        )

    async def get_item(self, db: AsyncSession, item_id: int) -> ItemResponse:
        item = await self._accessor.fetch_one(db, item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return ItemResponse.from_domain(item)

    async def create_item(
        self, db: AsyncSession, req: ItemCreateRequest
    ) -> ItemResponse:
        try:
            item = await self._repo.create_item(db, req.name, req.description)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Created item %s", item.id)
        await self._accessor.invalidate_collection()
        return ItemResponse.from_domain(item)

    async def update_item(
        self, db: AsyncSession, item_id: int, req: ItemUpdateRequest
    ) -> ItemResponse:
        try:
            current = await self._repo.lock_item(db, item_id)
            if current is None:
                raise ItemNotFoundError(item_id)
            name = req.name if req.name is not None else current.name
            description = (
                req.description if req.description is not None else current.description
            )
            item = await self._repo.update_item(db, item_id, name, description)
            if item is None:
                raise ItemNotFoundError(item_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Updated item %s", item_id)
        await self._accessor.invalidate_one(item_id)
        await self._accessor.invalidate_collection()
        return ItemResponse.from_domain(item)

    async def delete_item(self, db: AsyncSession, item_id: int) -> None:
        try:
            deleted = await self._repo.delete_item(db, item_id)
            if not deleted:
                raise ItemNotFoundError(item_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Deleted item %s", item_id)
        await self._accessor.invalidate_one(item_id)
        await self._accessor.invalidate_collection()
