"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access repositories, services, the acting user and request metadata.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from linkdeck.core.config import settings
from linkdeck.db.session import get_db
from linkdeck.models.common import RowStatus
from linkdeck.repositories.activity_repository import ActivityRepository
from linkdeck.repositories.base import RepositoryError
from linkdeck.repositories.collection_repository import CollectionRepository
from linkdeck.repositories.shortcut_repository import ShortcutRepository
from linkdeck.repositories.user_repository import UserRepository
from linkdeck.repositories.workspace_setting_repository import WorkspaceSettingRepository
from linkdeck.services.activity import ActivityRecorder
from linkdeck.services.analytics import AnalyticsService
from linkdeck.services.collection import CollectionService
from linkdeck.services.context import RequestContext
from linkdeck.services.metadata import MetadataService
from linkdeck.services.shortcut import ShortcutService
from linkdeck.services.visibility import Actor

logger = logging.getLogger(__name__)


async def get_shortcut_repository():
    """Get an instance of the shortcut repository."""
    return ShortcutRepository()


async def get_collection_repository():
    """Get an instance of the collection repository."""
    return CollectionRepository()


async def get_user_repository():
    return UserRepository()


async def get_activity_repository():
    return ActivityRepository()


async def get_workspace_setting_repository():
    return WorkspaceSettingRepository()


async def get_shortcut_service(
    shortcut_repo: ShortcutRepository = Depends(get_shortcut_repository),
    activity_repo: ActivityRepository = Depends(get_activity_repository),
) -> ShortcutService:
    """Get an instance of the shortcut service."""
    return ShortcutService(
        shortcut_repository=shortcut_repo,
        activity_repository=activity_repo,
        recorder=ActivityRecorder(activity_repo),
        analytics=AnalyticsService(activity_repo),
    )


async def get_collection_service(
    collection_repo: CollectionRepository = Depends(get_collection_repository),
) -> CollectionService:
    """Get an instance of the collection service."""
    return CollectionService(collection_repository=collection_repo)


async def get_metadata_service(
    shortcut_repo: ShortcutRepository = Depends(get_shortcut_repository),
    collection_repo: CollectionRepository = Depends(get_collection_repository),
    setting_repo: WorkspaceSettingRepository = Depends(get_workspace_setting_repository),
) -> MetadataService:
    """Get an instance of the metadata service."""
    return MetadataService(
        shortcut_repository=shortcut_repo,
        collection_repository=collection_repo,
        setting_repository=setting_repo,
    )


async def get_current_actor(
    request: Request,
    db: AsyncSession = Depends(get_db),
    user_repo: UserRepository = Depends(get_user_repository),
) -> Optional[Actor]:
    """
    Resolve the acting user from the trusted upstream actor header.

    The header is only honoured when ``TRUST_ACTOR_HEADER`` is enabled.
    Otherwise, or when the user id is missing, malformed, unknown or
    archived, the request proceeds as anonymous.
    """
    if not settings.TRUST_ACTOR_HEADER:
        return None

    raw_id = request.headers.get(settings.ACTOR_HEADER)
    if not raw_id:
        return None
    try:
        user_id = int(raw_id)
    except ValueError:
        logger.debug(f"Ignoring malformed {settings.ACTOR_HEADER} header: {raw_id!r}")
        return None

    try:
        user = await user_repo.get_by_id(db, user_id)
    except RepositoryError as e:
        logger.error(f"Error resolving actor {user_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to resolve actor") from e
    if user is None or user.row_status != RowStatus.NORMAL:
        return None
    return Actor(id=user.id, role=user.role)


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop, else the socket peer, else an empty string."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return ""


async def get_request_context(request: Request) -> RequestContext:
    """Capture the transport metadata used when recording views."""
    return RequestContext(
        peer=get_client_ip(request),
        referer=request.headers.get("Referer", ""),
        user_agent=request.headers.get("User-Agent", ""),
    )
