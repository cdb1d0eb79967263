# src/ic_items/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ic_items.domain.models import Item


class ItemRepositoryProtocol(Protocol):
    async def list_items(self, db: AsyncSession, limit: int) -> list[Item]: ...

    async def get_item(self, db: AsyncSession, item_id: int) -> Item | None: ...

    async def lock_item(self, db: AsyncSession, item_id: int) -> Item | None: ...

    async def create_item(
        self, db: AsyncSession, name: str, description: str
    ) -> Item: ...

    async def update_item(
        self,
        db: AsyncSession,
        item_id: int,
        name: str,
        description: str | None,
    ) -> Item | None: ...

    async def delete_item(self, db: AsyncSession, item_id: int) -> bool: ...
