"""Frontend page and crawler routes.

Shortcut and collection pages get the frontend index with preview metadata
injected into its head. robots.txt and sitemap.xml exist only while the
workspace has an instance URL configured.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from linkdeck.api.dependencies import get_metadata_service
from linkdeck.api.errors import to_http_exception
from linkdeck.core.config import settings
from linkdeck.core.decorators import log_page_access_decorator
from linkdeck.core.telemetry import enqueue_metric
from linkdeck.db.session import get_db
from linkdeck.services.exceptions import ServiceError
from linkdeck.services.metadata import Metadata, MetadataService, load_index_html

router = APIRouter(tags=["frontend"], include_in_schema=False)


def _render_page(metadata: Optional[Metadata]) -> HTMLResponse:
    return HTMLResponse((metadata or Metadata.default()).inject(load_index_html()))


@router.get(f"/{settings.SHORTCUT_PATH_PREFIX}/{{name}}", response_class=HTMLResponse)
@log_page_access_decorator(kind="shortcut", name_param="name")
async def shortcut_page(
    request: Request,
    name: str,
    db: AsyncSession = Depends(get_db),
    metadata_service: MetadataService = Depends(get_metadata_service),
):
    try:
        metadata = await metadata_service.shortcut_page(db, name)
    except ServiceError as e:
        logger.warning(f"Serving plain index for shortcut page {name!r}: {e}")
        metadata = None

    if metadata is not None:
        enqueue_metric("shortcut view")
    return _render_page(metadata)


@router.get(f"/{settings.COLLECTION_PATH_PREFIX}/{{name}}", response_class=HTMLResponse)
@log_page_access_decorator(kind="collection", name_param="name")
async def collection_page(
    request: Request,
    name: str,
    db: AsyncSession = Depends(get_db),
    metadata_service: MetadataService = Depends(get_metadata_service),
):
    try:
        metadata = await metadata_service.collection_page(db, name)
    except ServiceError as e:
        logger.warning(f"Serving plain index for collection page {name!r}: {e}")
        metadata = None

    if metadata is not None:
        enqueue_metric("collection view")
    return _render_page(metadata)


async def require_instance_url(
    db: AsyncSession = Depends(get_db),
    metadata_service: MetadataService = Depends(get_metadata_service),
) -> str:
    """Resolve the instance URL, answering 404 while it is not configured."""
    try:
        instance_url = await metadata_service.instance_url(db)
    except ServiceError as e:
        raise to_http_exception(e)
    if instance_url is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return instance_url


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots_txt(instance_url: str = Depends(require_instance_url)):
    return PlainTextResponse(MetadataService.robots_txt(instance_url))


@router.get("/sitemap.xml")
async def sitemap_xml(
    instance_url: str = Depends(require_instance_url),
    db: AsyncSession = Depends(get_db),
    metadata_service: MetadataService = Depends(get_metadata_service),
):
    try:
        sitemap = await metadata_service.sitemap_xml(db, instance_url)
    except ServiceError as e:
        raise to_http_exception(e)
    return Response(content=sitemap, media_type="application/xml")
