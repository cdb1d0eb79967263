"""FastAPI dependencies wiring ic_items to the process-wide clients.

The lifespan builds one ItemApplicationService around the shared Redis
client and stores it on ``app.state``; handlers only see it through here.
"""

from fastapi import Request

from config.settings import Settings
from src.ic_items.application.accessor import CachedItemAccessor
from src.ic_items.application.service import ItemApplicationService
from src.ic_items.domain.cache import ItemCacheProtocol
from src.ic_items.infrastructure.persistence import ItemRepository


def build_item_service(
    cache: ItemCacheProtocol, settings: Settings
) -> ItemApplicationService:
    repo = ItemRepository()
    accessor = CachedItemAccessor(
        repo,
        cache,
        list_ttl=settings.ITEMS_LIST_CACHE_TTL,
        item_ttl=settings.ITEM_CACHE_TTL,
        list_limit=settings.ITEMS_LIST_LIMIT,
    )
    return ItemApplicationService(repo, accessor)


def get_item_service(request: Request) -> ItemApplicationService:
    return request.app.state.item_service
