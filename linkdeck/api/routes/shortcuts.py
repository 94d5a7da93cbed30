"""Shortcut API routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from linkdeck.api import schemas
from linkdeck.api.dependencies import get_current_actor, get_request_context, get_shortcut_service
from linkdeck.api.errors import to_http_exception
from linkdeck.db.session import get_db
from linkdeck.models.analytics import ShortcutAnalyticsRead
from linkdeck.models.shortcut import ShortcutCreate, ShortcutRead
from linkdeck.services.context import RequestContext
from linkdeck.services.exceptions import ServiceError
from linkdeck.services.shortcut import ShortcutService
from linkdeck.services.visibility import Actor

router = APIRouter(prefix="/shortcuts", tags=["shortcuts"])

ERROR_RESPONSES = {
    400: {"model": schemas.ErrorResponse, "description": "Invalid request"},
    403: {"model": schemas.ErrorResponse, "description": "Not allowed for this actor"},
    404: {"model": schemas.ErrorResponse, "description": "Shortcut not found"},
    409: {"model": schemas.ErrorResponse, "description": "Shortcut name already in use"},
}


@router.get("", response_model=List[ShortcutRead])
async def list_shortcuts(
    db: AsyncSession = Depends(get_db),
    actor: Optional[Actor] = Depends(get_current_actor),
    shortcut_service: ShortcutService = Depends(get_shortcut_service),
):
    try:
        return await shortcut_service.list_shortcuts(db, actor)
    except ServiceError as e:
        raise to_http_exception(e)


@router.post(
    "",
    response_model=ShortcutRead,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_shortcut(
    draft: ShortcutCreate,
    db: AsyncSession = Depends(get_db),
    actor: Optional[Actor] = Depends(get_current_actor),
    shortcut_service: ShortcutService = Depends(get_shortcut_service),
):
    try:
        return await shortcut_service.create_shortcut(db, actor, draft)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/{name}/analytics", response_model=ShortcutAnalyticsRead, responses=ERROR_RESPONSES)
async def get_shortcut_analytics(
    name: str = Path(..., description="Shortcut name"),
    db: AsyncSession = Depends(get_db),
    shortcut_service: ShortcutService = Depends(get_shortcut_service),
):
    """View counts of a shortcut grouped by referer, OS family and browser family."""
    try:
        return await shortcut_service.get_shortcut_analytics(db, name)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/id/{shortcut_id}", response_model=ShortcutRead, responses=ERROR_RESPONSES)
async def get_shortcut_by_id(
    shortcut_id: int = Path(..., description="Shortcut id"),
    db: AsyncSession = Depends(get_db),
    actor: Optional[Actor] = Depends(get_current_actor),
    shortcut_service: ShortcutService = Depends(get_shortcut_service),
):
    try:
        return await shortcut_service.get_shortcut_by_id(db, shortcut_id, actor)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/{name}", response_model=ShortcutRead, responses=ERROR_RESPONSES)
async def get_shortcut(
    name: str = Path(..., description="Shortcut name"),
    record_view: bool = Query(False, description="Count this read as a page view"),
    db: AsyncSession = Depends(get_db),
    actor: Optional[Actor] = Depends(get_current_actor),
    context: RequestContext = Depends(get_request_context),
    shortcut_service: ShortcutService = Depends(get_shortcut_service),
):
    try:
        return await shortcut_service.get_shortcut(
            db,
            name,
            actor,
            record_view=record_view,
            context=context,
        )
    except ServiceError as e:
        raise to_http_exception(e)


@router.patch("/{shortcut_id}", response_model=ShortcutRead, responses=ERROR_RESPONSES)
async def update_shortcut(
    request: schemas.UpdateShortcutRequest,
    shortcut_id: int = Path(..., description="Shortcut id"),
    db: AsyncSession = Depends(get_db),
    actor: Optional[Actor] = Depends(get_current_actor),
    shortcut_service: ShortcutService = Depends(get_shortcut_service),
):
    """Apply the fields named in ``update_mask``; every other field is left as is."""
    try:
        return await shortcut_service.update_shortcut(
            db,
            actor,
            shortcut_id,
            request.update_mask,
            request.shortcut,
        )
    except ServiceError as e:
        raise to_http_exception(e)


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT, responses=ERROR_RESPONSES)
async def delete_shortcut(
    name: str = Path(..., description="Shortcut name"),
    db: AsyncSession = Depends(get_db),
    actor: Optional[Actor] = Depends(get_current_actor),
    shortcut_service: ShortcutService = Depends(get_shortcut_service),
):
    try:
        await shortcut_service.delete_shortcut(db, actor, name)
    except ServiceError as e:
        raise to_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
