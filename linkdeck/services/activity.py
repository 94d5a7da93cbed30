"""Activity recorder.

Appends view and creation facts to the activity log. Callers decide how a
failure is handled: view recording is best-effort, creation recording is
fatal to the create operation.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from linkdeck.models.activity import (
    SYSTEM_ACTOR_ID,
    Activity,
    ActivityCreate,
    ActivityLevel,
    ActivityType,
    ShortcutCreatePayload,
    ShortcutViewPayload,
)
from linkdeck.models.shortcut import Shortcut
from linkdeck.repositories.activity_repository import ActivityRepository
from linkdeck.repositories.base import RepositoryError
from linkdeck.services.context import RequestContext
from linkdeck.services.exceptions import ActivityRecordError
from linkdeck.services.visibility import Actor

logger = logging.getLogger(__name__)


class ActivityRecorder:
    """Writes shortcut activities through the activity repository."""

    def __init__(self, activity_repository: ActivityRepository):
        self.activity_repository = activity_repository

    async def record_view(
        self,
        db: AsyncSession,
        shortcut: Shortcut,
        context: Optional[RequestContext],
        actor: Optional[Actor] = None,
    ) -> Activity:
        """
        Record a view of ``shortcut``.

        Args:
            db: Database session
            shortcut: The viewed shortcut
            context: Transport metadata of the viewing request
            actor: The viewing user, or None for anonymous views

        Returns:
            Activity: The appended view activity

        Raises:
            ActivityRecordError: If the context or its peer address is missing,
                or the activity cannot be stored
        """
        if context is None:
            raise ActivityRecordError("No request context to record the view from")
        if not context.peer:
            raise ActivityRecordError("Request context carries no peer address")

        payload = ShortcutViewPayload(
            shortcut_id=shortcut.id,
            ip=context.peer,
            referer=context.referer,
            user_agent=context.user_agent,
        )
        return await self._append(
            db,
            ActivityCreate(
                creator_id=actor.id if actor is not None else SYSTEM_ACTOR_ID,
                type=ActivityType.SHORTCUT_VIEW,
                level=ActivityLevel.INFO,
                payload=payload.model_dump(),
            ),
        )

    async def record_create(self, db: AsyncSession, shortcut: Shortcut, actor_id: int) -> Activity:
        """
        Record the creation of ``shortcut`` by ``actor_id``.

        Raises:
            ActivityRecordError: If the activity cannot be stored
        """
        payload = ShortcutCreatePayload(shortcut_id=shortcut.id)
        return await self._append(
            db,
            ActivityCreate(
                creator_id=actor_id,
                type=ActivityType.SHORTCUT_CREATE,
                level=ActivityLevel.INFO,
                payload=payload.model_dump(),
            ),
        )

    async def _append(self, db: AsyncSession, data: ActivityCreate) -> Activity:
        try:
            return await self.activity_repository.create_activity(db, data)
        except RepositoryError as e:
            logger.error(f"Error recording {data.type.value} activity: {e}")
            raise ActivityRecordError(f"Failed to record {data.type.value} activity") from e
