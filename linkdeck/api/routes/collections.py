"""Collection API routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from linkdeck.api import schemas
from linkdeck.api.dependencies import get_collection_service, get_current_actor
from linkdeck.api.errors import to_http_exception
from linkdeck.db.session import get_db
from linkdeck.models.collection import CollectionCreate, CollectionRead
from linkdeck.services.collection import CollectionService
from linkdeck.services.exceptions import ServiceError
from linkdeck.services.visibility import Actor

router = APIRouter(prefix="/collections", tags=["collections"])

ERROR_RESPONSES = {
    400: {"model": schemas.ErrorResponse, "description": "Invalid request"},
    403: {"model": schemas.ErrorResponse, "description": "Not allowed for this actor"},
    404: {"model": schemas.ErrorResponse, "description": "Collection not found"},
    409: {"model": schemas.ErrorResponse, "description": "Collection name already in use"},
}


@router.get("", response_model=List[CollectionRead])
async def list_collections(
    db: AsyncSession = Depends(get_db),
    actor: Optional[Actor] = Depends(get_current_actor),
    collection_service: CollectionService = Depends(get_collection_service),
):
    try:
        return await collection_service.list_collections(db, actor)
    except ServiceError as e:
        raise to_http_exception(e)


@router.post(
    "",
    response_model=CollectionRead,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_collection(
    draft: CollectionCreate,
    db: AsyncSession = Depends(get_db),
    actor: Optional[Actor] = Depends(get_current_actor),
    collection_service: CollectionService = Depends(get_collection_service),
):
    try:
        return await collection_service.create_collection(db, actor, draft)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/id/{collection_id}", response_model=CollectionRead, responses=ERROR_RESPONSES)
async def get_collection_by_id(
    collection_id: int = Path(..., description="Collection id"),
    db: AsyncSession = Depends(get_db),
    actor: Optional[Actor] = Depends(get_current_actor),
    collection_service: CollectionService = Depends(get_collection_service),
):
    try:
        return await collection_service.get_collection_by_id(db, collection_id, actor)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/{name}", response_model=CollectionRead, responses=ERROR_RESPONSES)
async def get_collection(
    name: str = Path(..., description="Collection name"),
    db: AsyncSession = Depends(get_db),
    actor: Optional[Actor] = Depends(get_current_actor),
    collection_service: CollectionService = Depends(get_collection_service),
):
    try:
        return await collection_service.get_collection(db, name, actor)
    except ServiceError as e:
        raise to_http_exception(e)


@router.patch("/{collection_id}", response_model=CollectionRead, responses=ERROR_RESPONSES)
async def update_collection(
    request: schemas.UpdateCollectionRequest,
    collection_id: int = Path(..., description="Collection id"),
    db: AsyncSession = Depends(get_db),
    actor: Optional[Actor] = Depends(get_current_actor),
    collection_service: CollectionService = Depends(get_collection_service),
):
    try:
        return await collection_service.update_collection(
            db,
            actor,
            collection_id,
            request.update_mask,
            request.collection,
        )
    except ServiceError as e:
        raise to_http_exception(e)


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT, responses=ERROR_RESPONSES)
async def delete_collection(
    name: str = Path(..., description="Collection name"),
    db: AsyncSession = Depends(get_db),
    actor: Optional[Actor] = Depends(get_current_actor),
    collection_service: CollectionService = Depends(get_collection_service),
):
    try:
        await collection_service.delete_collection(db, actor, name)
    except ServiceError as e:
        raise to_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
