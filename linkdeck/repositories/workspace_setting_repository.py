"""Workspace setting repository."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from linkdeck.models.workspace_setting import WorkspaceSetting
from linkdeck.repositories.base import BaseRepository, RepositoryError


class WorkspaceSettingRepository(BaseRepository[WorkspaceSetting, WorkspaceSetting, WorkspaceSetting]):
    """Repository for keyed workspace settings."""

    def __init__(self):
        super().__init__(WorkspaceSetting)

    async def get_setting(self, db: AsyncSession, key: str) -> Optional[WorkspaceSetting]:
        return await self.get_by_id(db, key)

    async def upsert_setting(self, db: AsyncSession, key: str, value: str) -> WorkspaceSetting:
        """
        Create the setting or overwrite its value.

        Raises:
            RepositoryError: On database errors
        """
        setting = await self.get_setting(db, key)
        if setting is None:
            return await self.create(db, {"key": key, "value": value})

        setting.value = value
        try:
            await db.flush()
            await db.refresh(setting)
            return setting
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error updating workspace setting {key}: {e}") from e
