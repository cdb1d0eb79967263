"""ic_items REST endpoints.

GET    /items              — newest first, bounded listing (cached 60s)
GET    /items/{item_id}    — single item (cached 5min)
POST   /items              — create, invalidates listing
PUT    /items/{item_id}    — partial update (PATCH alias), invalidates item + listing
DELETE /items/{item_id}    — delete, invalidates item + listing
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ic_common.database import get_db_session
from src.ic_common.request_log import get_request_id
from src.ic_common.response import ApiResponse, success_response
from src.ic_items.api.dependencies import get_item_service
from src.ic_items.application.schemas import ItemCreateRequest, ItemUpdateRequest
from src.ic_items.application.service import ItemApplicationService

router = APIRouter(prefix="/items", tags=["items"])

ServiceDep = Annotated[ItemApplicationService, Depends(get_item_service)]
DbDep = Annotated[AsyncSession, Depends(get_db_session)]
# items.id is BIGINT identity; reject anything outside it before the store sees it
ItemIdPath = Annotated[int, Path(ge=1, le=2**63 - 1)]


@router.get("")
async def list_items(request: Request, service: ServiceDep, db: DbDep) -> ApiResponse:
    result = await service.list_items(db)
    return success_response(result.model_dump(), get_request_id(request))


@router.get("/{item_id}")
async def get_item(
    item_id: ItemIdPath, request: Request, service: ServiceDep, db: DbDep
) -> ApiResponse:
    result = await service.get_item(db, item_id)
    return success_response(result.model_dump(), get_request_id(request))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_item(
    body: ItemCreateRequest, request: Request, service: ServiceDep, db: DbDep
) -> ApiResponse:
    result = await service.create_item(db, body)
    return success_response(result.model_dump(), get_request_id(request))


@router.api_route("/{item_id}", methods=["PUT", "PATCH"])
async def update_item(
    item_id: ItemIdPath,
    body: ItemUpdateRequest,
    request: Request,
    service: ServiceDep,
    db: DbDep,
) -> ApiResponse:
    result = await service.update_item(db, item_id, body)
    return success_response(result.model_dump(), get_request_id(request))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(item_id: ItemIdPath, service: ServiceDep, db: DbDep) -> Response:
    await service.delete_item(db, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
