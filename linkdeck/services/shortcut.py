"""Shortcut resolver.

This module contains the ShortcutService class which finds, authorizes,
mutates and composes shortcuts for every public shortcut operation.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from linkdeck.core.telemetry import enqueue_metric
from linkdeck.db.session import db_transaction
from linkdeck.models.activity import ActivityType
from linkdeck.models.analytics import ShortcutAnalyticsRead
from linkdeck.models.common import Visibility
from linkdeck.models.shortcut import (
    Shortcut,
    ShortcutCreate,
    ShortcutDraft,
    ShortcutRead,
    ShortcutUpdate,
)
from linkdeck.repositories.activity_repository import ActivityRepository
from linkdeck.repositories.base import RepositoryError, DuplicateEntityError
from linkdeck.repositories.shortcut_repository import ShortcutRepository
from linkdeck.services.activity import ActivityRecorder
from linkdeck.services.analytics import AnalyticsService
from linkdeck.services.context import RequestContext
from linkdeck.services.exceptions import (
    ActivityRecordError,
    AlreadyExistsError,
    InternalError,
    InvalidArgumentError,
    PermissionDeniedError,
    ShortcutNotFoundError,
)
from linkdeck.services.visibility import Actor, can_read, can_write

logger = logging.getLogger(__name__)

SHARED_VISIBILITIES = (Visibility.WORKSPACE, Visibility.PUBLIC)


class ShortcutService:
    """
    Service for shortcut business logic.

    Every operation takes the acting user explicitly; ``None`` stands for an
    anonymous caller. Returned shortcuts carry a ``view_count`` derived from
    the activity log at the time of the call.
    """

    def __init__(
        self,
        shortcut_repository: ShortcutRepository,
        activity_repository: ActivityRepository,
        recorder: ActivityRecorder,
        analytics: AnalyticsService,
    ):
        """
        Initialize the shortcut service.

        Args:
            shortcut_repository: Repository for shortcut data access
            activity_repository: Repository used to derive view counts
            recorder: Writer for view and creation activities
            analytics: Aggregator for view analytics
        """
        self.shortcut_repository = shortcut_repository
        self.activity_repository = activity_repository
        self.recorder = recorder
        self.analytics = analytics

    async def _compose(self, db: AsyncSession, shortcut: Shortcut) -> ShortcutRead:
        try:
            view_count = await self.activity_repository.count_activities(
                db, type=ActivityType.SHORTCUT_VIEW, shortcut_id=shortcut.id
            )
        except RepositoryError as e:
            logger.error(f"Error counting views of shortcut {shortcut.id}: {e}")
            raise InternalError("Failed to compose shortcut") from e
        return ShortcutRead.from_entity(shortcut, view_count)

    async def _find_by_name(self, db: AsyncSession, name: str) -> Shortcut:
        try:
            shortcut = await self.shortcut_repository.get_by_name(db, name)
        except RepositoryError as e:
            logger.error(f"Error retrieving shortcut {name!r}: {e}")
            raise InternalError("Failed to retrieve shortcut") from e
        if shortcut is None:
            raise ShortcutNotFoundError(f"Shortcut '{name}' not found")
        return shortcut

    async def _find_by_id(self, db: AsyncSession, shortcut_id: int) -> Shortcut:
        try:
            shortcut = await self.shortcut_repository.get_by_id(db, shortcut_id)
        except RepositoryError as e:
            logger.error(f"Error retrieving shortcut {shortcut_id}: {e}")
            raise InternalError("Failed to retrieve shortcut") from e
        if shortcut is None:
            raise ShortcutNotFoundError(f"Shortcut with id {shortcut_id} not found")
        return shortcut

    async def list_shortcuts(self, db: AsyncSession, actor: Optional[Actor]) -> List[ShortcutRead]:
        """
        List the shortcuts visible to ``actor``.

        Members get every workspace and public shortcut plus their own
        private ones. Anonymous callers get the public subset only.

        Raises:
            InternalError: On store failures
        """
        try:
            if actor is None:
                shortcuts = await self.shortcut_repository.list_shortcuts(
                    db, visibilities=[Visibility.PUBLIC]
                )
            else:
                shortcuts = await self.shortcut_repository.list_shortcuts(
                    db, visibilities=SHARED_VISIBILITIES, creator_id=actor.id
                )
        except RepositoryError as e:
            logger.error(f"Error listing shortcuts: {e}")
            raise InternalError("Failed to list shortcuts") from e

        unique = {shortcut.id: shortcut for shortcut in shortcuts}
        return [await self._compose(db, shortcut) for shortcut in unique.values()]

    @db_transaction(db_param_name="db")
    async def get_shortcut(
        self,
        db: AsyncSession,
        name: str,
        actor: Optional[Actor],
        record_view: bool = False,
        context: Optional[RequestContext] = None,
    ) -> ShortcutRead:
        """
        Get a shortcut by its exact name.

        When ``record_view`` is set, a view activity is appended after the
        response has been composed. Recording failures are logged and never
        change the result.

        Args:
            db: Database session
            name: Shortcut name
            actor: Acting user, or None for anonymous callers
            record_view: Whether this read counts as a page view
            context: Transport metadata of the viewing request

        Returns:
            ShortcutRead: The shortcut with its view count

        Raises:
            ShortcutNotFoundError: If no shortcut has this name
            PermissionDeniedError: If the actor may not read it
            InternalError: On store failures
        """
        shortcut = await self._find_by_name(db, name)
        if not can_read(actor, shortcut):
            raise PermissionDeniedError(f"Not allowed to read shortcut '{name}'")

        result = await self._compose(db, shortcut)

        if record_view:
            try:
                await self.recorder.record_view(db, shortcut, context, actor=actor)
            except ActivityRecordError as e:
                logger.warning(f"Failed to record view of shortcut {result.id}: {e}")

        return result

    async def get_shortcut_by_id(
        self,
        db: AsyncSession,
        shortcut_id: int,
        actor: Optional[Actor],
    ) -> ShortcutRead:
        """
        Get a shortcut by id.

        Raises:
            ShortcutNotFoundError: If no shortcut has this id
            PermissionDeniedError: If the actor may not read it
            InternalError: On store failures
        """
        shortcut = await self._find_by_id(db, shortcut_id)
        if not can_read(actor, shortcut):
            raise PermissionDeniedError(f"Not allowed to read shortcut {shortcut_id}")
        return await self._compose(db, shortcut)

    @db_transaction(db_param_name="db")
    async def create_shortcut(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        draft: ShortcutCreate,
    ) -> ShortcutRead:
        """
        Create a shortcut owned by ``actor`` and record its creation.

        The shortcut is committed before the creation activity is written.
        If the activity cannot be written the call fails, but the shortcut
        stays persisted without its audit record.

        Args:
            db: Database session
            actor: Acting user; anonymous callers cannot create
            draft: Submitted shortcut fields

        Returns:
            ShortcutRead: The created shortcut

        Raises:
            PermissionDeniedError: If the caller is anonymous
            AlreadyExistsError: If a live shortcut already uses the name
            InternalError: On store failures or if the creation cannot be recorded
        """
        if actor is None:
            raise PermissionDeniedError("Anonymous callers cannot create shortcuts")

        try:
            shortcut = await self.shortcut_repository.create_shortcut(db, actor.id, draft)
            await db.commit()
        except DuplicateEntityError as e:
            raise AlreadyExistsError(f"Shortcut '{draft.name}' already exists") from e
        except RepositoryError as e:
            logger.error(f"Error creating shortcut: {e}")
            raise InternalError("Failed to create shortcut") from e

        shortcut_id = shortcut.id
        try:
            await self.recorder.record_create(db, shortcut, actor.id)
        except ActivityRecordError as e:
            logger.error(f"Shortcut {shortcut_id} created without a creation activity: {e}")
            raise InternalError("Failed to record shortcut creation") from e

        enqueue_metric("shortcut created")
        logger.info(f"Created shortcut '{shortcut.name}' (id={shortcut.id}) for user {actor.id}")
        return await self._compose(db, shortcut)

    @db_transaction(db_param_name="db")
    async def update_shortcut(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        shortcut_id: int,
        update_mask: Sequence[str],
        draft: ShortcutDraft,
    ) -> ShortcutRead:
        """
        Update the fields of a shortcut named by ``update_mask``.

        Only masked fields change; everything else in ``draft`` is ignored.

        Args:
            db: Database session
            actor: Acting user
            shortcut_id: Target shortcut id
            update_mask: Field names to update
            draft: Source of the new field values

        Returns:
            ShortcutRead: The updated shortcut

        Raises:
            InvalidArgumentError: If ``update_mask`` is empty or clears the name
            ShortcutNotFoundError: If no shortcut has this id
            PermissionDeniedError: If the actor is neither owner nor admin
            AlreadyExistsError: If the update renames onto a taken name
            InternalError: On store failures
        """
        if not update_mask:
            raise InvalidArgumentError("update_mask is required")

        shortcut = await self._find_by_id(db, shortcut_id)
        if not can_write(actor, shortcut):
            raise PermissionDeniedError(f"Not allowed to update shortcut {shortcut_id}")

        try:
            patch = ShortcutUpdate.from_mask(update_mask, draft)
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from e

        try:
            shortcut = await self.shortcut_repository.apply_patch(db, shortcut, patch)
        except DuplicateEntityError as e:
            raise AlreadyExistsError(f"Shortcut '{patch.name}' already exists") from e
        except RepositoryError as e:
            logger.error(f"Error updating shortcut {shortcut_id}: {e}")
            raise InternalError("Failed to update shortcut") from e

        return await self._compose(db, shortcut)

    @db_transaction(db_param_name="db")
    async def delete_shortcut(self, db: AsyncSession, actor: Optional[Actor], name: str) -> None:
        """
        Delete a shortcut by name.

        Activities referencing the shortcut are kept.

        Raises:
            ShortcutNotFoundError: If no shortcut has this name
            PermissionDeniedError: If the actor is neither owner nor admin
            InternalError: On store failures
        """
        shortcut = await self._find_by_name(db, name)
        if not can_write(actor, shortcut):
            raise PermissionDeniedError(f"Not allowed to delete shortcut '{name}'")

        try:
            await self.shortcut_repository.delete(db, shortcut.id)
        except RepositoryError as e:
            logger.error(f"Error deleting shortcut {shortcut.id}: {e}")
            raise InternalError("Failed to delete shortcut") from e

        logger.info(f"Deleted shortcut '{name}' (id={shortcut.id})")

    async def get_shortcut_analytics(self, db: AsyncSession, name: str) -> ShortcutAnalyticsRead:
        """
        Aggregate the views of a shortcut by referer, OS family and browser.

        Raises:
            ShortcutNotFoundError: If no shortcut has this name
            InternalError: On store failures
        """
        shortcut = await self._find_by_name(db, name)
        result = await self.analytics.aggregate_views(db, shortcut.id)
        enqueue_metric("shortcut analytics")
        return result
