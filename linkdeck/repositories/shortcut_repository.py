"""Shortcut repository.

This module provides the ShortcutRepository class for database operations
on Shortcut rows: lookup by name, visibility-filtered listing, name
uniqueness checks among live rows, creation and field-by-field patches.
"""

from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.sql.expression import and_, or_

from linkdeck.models.common import RowStatus, Visibility, utcnow
from linkdeck.models.shortcut import Shortcut, ShortcutCreate, ShortcutUpdate
from linkdeck.repositories.base import BaseRepository, RepositoryError, DuplicateEntityError


def _join_tags(tags: Iterable[str]) -> str:
    return " ".join(" ".join(tags).split())


class ShortcutRepository(BaseRepository[Shortcut, ShortcutCreate, ShortcutUpdate]):
    """
    Repository for Shortcut model database operations.

    Names are unique among NORMAL rows only; archived rows may keep a name
    that has since been reused by a live shortcut.
    """

    def __init__(self):
        super().__init__(Shortcut)

    async def get_by_name(self, db: AsyncSession, name: str) -> Optional[Shortcut]:
        """
        Find a shortcut by its exact, case-sensitive name.

        When archived rows share the name, the NORMAL row wins.

        Args:
            db: Database session
            name: Shortcut name

        Returns:
            The Shortcut if found, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        try:
            query = (
                select(Shortcut)
                .where(Shortcut.name == name)
                .order_by(
                    (Shortcut.row_status == RowStatus.NORMAL).desc(),
                    Shortcut.id.desc(),
                )
                .limit(1)
            )
            result = await db.execute(query)
            return result.scalars().first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error retrieving shortcut by name: {e}") from e

    async def list_shortcuts(
        self,
        db: AsyncSession,
        visibilities: Optional[Iterable[Visibility]] = None,
        creator_id: Optional[int] = None,
    ) -> List[Shortcut]:
        """
        List shortcuts matching any of the given visibilities, or owned by
        ``creator_id``.

        Both filters are OR-ed together so a single query returns the shared
        shortcuts plus the caller's own. Passing neither filter lists
        every shortcut.

        Raises:
            RepositoryError: On database errors
        """
        try:
            conditions = []
            if visibilities:
                conditions.append(Shortcut.visibility.in_(list(visibilities)))
            if creator_id is not None:
                conditions.append(Shortcut.creator_id == creator_id)

            query = select(Shortcut).order_by(Shortcut.id)
            if conditions:
                query = query.where(or_(*conditions))

            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error listing shortcuts: {e}") from e

    async def name_in_use(
        self,
        db: AsyncSession,
        name: str,
        exclude_id: Optional[int] = None
    ) -> bool:
        """Check whether a NORMAL shortcut other than ``exclude_id`` holds ``name``."""
        try:
            conditions = [
                Shortcut.name == name,
                Shortcut.row_status == RowStatus.NORMAL,
            ]
            if exclude_id is not None:
                conditions.append(Shortcut.id != exclude_id)
            query = select(func.count()).select_from(Shortcut).where(and_(*conditions))
            result = await db.execute(query)
            return result.scalar_one() > 0
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error checking shortcut name: {e}") from e

    async def create_shortcut(
        self,
        db: AsyncSession,
        creator_id: int,
        data: ShortcutCreate
    ) -> Shortcut:
        """
        Create a shortcut owned by ``creator_id``.

        Args:
            db: Database session
            creator_id: Owner of the new shortcut
            data: Submitted shortcut fields

        Returns:
            The created Shortcut entity

        Raises:
            DuplicateEntityError: If a live shortcut already uses the name
            RepositoryError: On other database errors
        """
        if await self.name_in_use(db, data.name):
            raise DuplicateEntityError(Shortcut, "name", data.name)

        values: Dict[str, Any] = {
            "creator_id": creator_id,
            "name": data.name,
            "link": data.link,
            "title": data.title,
            "description": data.description,
            "visibility": data.visibility,
            "tag": _join_tags(data.tags),
        }
        if data.og_metadata is not None:
            values["og_title"] = data.og_metadata.title
            values["og_description"] = data.og_metadata.description
            values["og_image"] = data.og_metadata.image

        try:
            return await self.create(db, values)
        except RepositoryError as e:
            if isinstance(e.__cause__, IntegrityError):
                raise DuplicateEntityError(Shortcut, "name", data.name) from e
            raise

    async def apply_patch(
        self,
        db: AsyncSession,
        shortcut: Shortcut,
        patch: ShortcutUpdate
    ) -> Shortcut:
        """
        Write the fields set on ``patch`` to ``shortcut``.

        Fields the patch leaves unset are not touched. ``tags`` replaces the
        whole tag set and ``og_metadata`` replaces all three override columns.

        Raises:
            DuplicateEntityError: If the patch renames onto a live shortcut's name
            RepositoryError: On other database errors
        """
        changes = patch.model_dump(exclude_unset=True)

        if "name" in changes and changes["name"] != shortcut.name:
            if await self.name_in_use(db, changes["name"], exclude_id=shortcut.id):
                raise DuplicateEntityError(Shortcut, "name", changes["name"])

        if "tags" in changes:
            shortcut.tag = _join_tags(changes.pop("tags"))
        if "og_metadata" in changes:
            changes.pop("og_metadata")
            shortcut.og_title = patch.og_metadata.title
            shortcut.og_description = patch.og_metadata.description
            shortcut.og_image = patch.og_metadata.image
        for key, value in changes.items():
            setattr(shortcut, key, value)
        shortcut.updated_at = utcnow()

        try:
            await db.flush()
            await db.refresh(shortcut)
            return shortcut
        except IntegrityError as e:
            raise DuplicateEntityError(Shortcut, "name", shortcut.name) from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error updating shortcut {shortcut.id}: {e}") from e
