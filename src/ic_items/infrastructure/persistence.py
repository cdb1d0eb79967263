"""ItemRepository — concrete implementation of ItemRepositoryProtocol.

All queries use raw text() SQL (no ORM). Writes are single statements with
RETURNING so the caller gets the row exactly as the database stored it.
Transaction boundaries (commit/rollback) belong to the application service.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ic_items.domain.models import Item

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_COLUMNS = "id, name, description, created_at, updated_at"

_LIST_ITEMS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM items
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

_GET_ITEM_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM items
    WHERE id = :item_id
""")

_LOCK_ITEM_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM items
    WHERE id = :item_id
    FOR UPDATE
""")

_INSERT_ITEM_SQL = text(f"""
    INSERT INTO items (name, description)
    VALUES (:name, :description)
    RETURNING {_COLUMNS}
""")

_UPDATE_ITEM_SQL = text(f"""
    UPDATE items
    SET name = :name, description = :description, updated_at = NOW()
    WHERE id = :item_id
    RETURNING {_COLUMNS}
""")

_DELETE_ITEM_SQL = text("""
    DELETE FROM items
    WHERE id = :item_id
    RETURNING id
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------

def _row_to_item(row: object) -> Item:
    return Item(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class ItemRepository:
    async def list_items(self, db: AsyncSession, limit: int) -> list[Item]:
        result = await db.execute(_LIST_ITEMS_SQL, {"limit": limit})
        return [_row_to_item(row) for row in result.fetchall()]

    async def get_item(self, db: AsyncSession, item_id: int) -> Item | None:
        result = await db.execute(_GET_ITEM_SQL, {"item_id": item_id})
        row = result.fetchone()
        return _row_to_item(row) if row else None

    async def lock_item(self, db: AsyncSession, item_id: int) -> Item | None:
        """Row-lock the item for the rest of the transaction; None if absent."""
        result = await db.execute(_LOCK_ITEM_SQL, {"item_id": item_id})
        row = result.fetchone()
        return _row_to_item(row) if row else None

    async def create_item(
        self, db: AsyncSession, name: str, description: str
    ) -> Item:
        result = await db.execute(
            _INSERT_ITEM_SQL, {"name": name, "description": description}
        )
        return _row_to_item(result.one())

    async def update_item(
        self,
        db: AsyncSession,
        item_id: int,
        name: str,
        description: str | None,
    ) -> Item | None:
        result = await db.execute(
            _UPDATE_ITEM_SQL,
            {"item_id": item_id, "name": name, "description": description},
        )
        row = result.fetchone()
        return _row_to_item(row) if row else None

    async def delete_item(self, db: AsyncSession, item_id: int) -> bool:
        result = await db.execute(_DELETE_ITEM_SQL, {"item_id": item_id})
        return result.fetchone() is not None
