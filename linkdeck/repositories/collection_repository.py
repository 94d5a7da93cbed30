"""Collection repository."""

from typing import Iterable, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.sql.expression import or_

from linkdeck.models.collection import Collection, CollectionCreate, CollectionUpdate
from linkdeck.models.common import Visibility, utcnow
from linkdeck.repositories.base import BaseRepository, RepositoryError, DuplicateEntityError


class CollectionRepository(BaseRepository[Collection, CollectionCreate, CollectionUpdate]):
    """Repository for Collection model database operations."""

    def __init__(self):
        super().__init__(Collection)

    async def get_by_name(self, db: AsyncSession, name: str) -> Optional[Collection]:
        try:
            query = select(Collection).where(Collection.name == name)
            result = await db.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error retrieving collection by name: {e}") from e

    async def list_collections(
        self,
        db: AsyncSession,
        visibilities: Optional[Iterable[Visibility]] = None,
        creator_id: Optional[int] = None,
    ) -> List[Collection]:
        """
        List collections matching any of the given visibilities, or owned by
        ``creator_id``. Filters are OR-ed together.

        Raises:
            RepositoryError: On database errors
        """
        try:
            conditions = []
            if visibilities:
                conditions.append(Collection.visibility.in_(list(visibilities)))
            if creator_id is not None:
                conditions.append(Collection.creator_id == creator_id)

            query = select(Collection).order_by(Collection.id)
            if conditions:
                query = query.where(or_(*conditions))

            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error listing collections: {e}") from e

    async def name_in_use(
        self,
        db: AsyncSession,
        name: str,
        exclude_id: Optional[int] = None
    ) -> bool:
        try:
            query = select(func.count()).select_from(Collection).where(Collection.name == name)
            if exclude_id is not None:
                query = query.where(Collection.id != exclude_id)
            result = await db.execute(query)
            return result.scalar_one() > 0
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error checking collection name: {e}") from e

    async def create_collection(
        self,
        db: AsyncSession,
        creator_id: int,
        data: CollectionCreate
    ) -> Collection:
        """
        Create a collection owned by ``creator_id``.

        Raises:
            DuplicateEntityError: If the name is already taken
            RepositoryError: On other database errors
        """
        if await self.name_in_use(db, data.name):
            raise DuplicateEntityError(Collection, "name", data.name)

        try:
            return await self.create(db, {**data.model_dump(), "creator_id": creator_id})
        except RepositoryError as e:
            if isinstance(e.__cause__, IntegrityError):
                raise DuplicateEntityError(Collection, "name", data.name) from e
            raise

    async def apply_patch(
        self,
        db: AsyncSession,
        collection: Collection,
        patch: CollectionUpdate
    ) -> Collection:
        """
        Write the fields set on ``patch`` to ``collection``.

        Raises:
            DuplicateEntityError: If the patch renames onto a taken name
            RepositoryError: On other database errors
        """
        changes = patch.model_dump(exclude_unset=True)

        if "name" in changes and changes["name"] != collection.name:
            if await self.name_in_use(db, changes["name"], exclude_id=collection.id):
                raise DuplicateEntityError(Collection, "name", changes["name"])

        for key, value in changes.items():
            setattr(collection, key, value)
        collection.updated_at = utcnow()

        try:
            await db.flush()
            await db.refresh(collection)
            return collection
        except IntegrityError as e:
            raise DuplicateEntityError(Collection, "name", collection.name) from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error updating collection {collection.id}: {e}") from e
