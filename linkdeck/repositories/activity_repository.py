"""Activity repository.

Activities are append-only: this repository exposes creation and filtered
reads. The generic update and delete entry points raise.
"""

from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from linkdeck.models.activity import Activity, ActivityCreate, ActivityLevel, ActivityType
from linkdeck.repositories.base import BaseRepository, RepositoryError


class ActivityRepository(BaseRepository[Activity, ActivityCreate, ActivityCreate]):
    """Repository for the append-only activity log."""

    def __init__(self):
        super().__init__(Activity)

    def _filters(
        self,
        type: Optional[ActivityType],
        level: Optional[ActivityLevel],
        shortcut_id: Optional[int],
    ) -> list:
        conditions = []
        if type is not None:
            conditions.append(Activity.type == type)
        if level is not None:
            conditions.append(Activity.level == level)
        if shortcut_id is not None:
            conditions.append(Activity.payload["shortcut_id"].as_integer() == shortcut_id)
        return conditions

    async def create_activity(
        self,
        db: AsyncSession,
        data: Union[ActivityCreate, Dict[str, Any]]
    ) -> Activity:
        """
        Append an activity record.

        Args:
            db: Database session
            data: Activity data (either as an ActivityCreate model or dictionary)

        Returns:
            The created Activity entity

        Raises:
            RepositoryError: On database errors
        """
        if isinstance(data, ActivityCreate):
            data = data.model_dump()
        return await self.create(db, data)

    async def list_activities(
        self,
        db: AsyncSession,
        type: Optional[ActivityType] = None,
        level: Optional[ActivityLevel] = None,
        shortcut_id: Optional[int] = None,
    ) -> List[Activity]:
        """
        List activities in arrival order.

        Args:
            db: Database session
            type: Only activities of this type
            level: Only activities of this level
            shortcut_id: Only activities whose payload references this shortcut

        Raises:
            RepositoryError: On database errors
        """
        try:
            query = (
                select(Activity)
                .where(*self._filters(type, level, shortcut_id))
                .order_by(Activity.id)
            )
            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error listing activities: {e}") from e

    async def count_activities(
        self,
        db: AsyncSession,
        type: Optional[ActivityType] = None,
        level: Optional[ActivityLevel] = None,
        shortcut_id: Optional[int] = None,
    ) -> int:
        try:
            query = (
                select(func.count())
                .select_from(Activity)
                .where(*self._filters(type, level, shortcut_id))
            )
            result = await db.execute(query)
            return result.scalar_one()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error counting activities: {e}") from e

    async def update(self, db: AsyncSession, id: Any, data: Any) -> Optional[Activity]:
        raise RepositoryError("Activities are append-only and cannot be updated")

    async def delete(self, db: AsyncSession, id: Any) -> bool:
        raise RepositoryError("Activities are append-only and cannot be deleted")
