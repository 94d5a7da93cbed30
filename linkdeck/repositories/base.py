"""Generic repository for SQLModel entities.

Concrete repositories derive from BaseRepository and add the queries their
entity needs. Every database failure surfaces as a RepositoryError so the
service layer never sees raw SQLAlchemy exceptions.
"""

from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union
import logging

from pydantic import BaseModel
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel

T = TypeVar("T", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class DuplicateEntityError(RepositoryError):
    """Raised when a write would violate a uniqueness rule."""

    def __init__(self, model_type: Type[SQLModel], field_name: str, value: Any):
        self.model_type = model_type
        self.field_name = field_name
        self.value = value
        model_name = getattr(model_type, "__name__", "Entity")
        super().__init__(f"{model_name} with {field_name}={value} already exists")


def _as_dict(data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    return dict(data)


class BaseRepository(Generic[T, CreateSchemaType, UpdateSchemaType]):
    """
    Base repository implementing common CRUD operations for SQLModel entities.

    Type parameters:
        T: The SQLModel table type this repository manages
        CreateSchemaType: The model accepted by ``create``
        UpdateSchemaType: The model accepted by ``update``
    """

    def __init__(self, model_type: Type[T]):
        self.model_type = model_type

    async def get_by_id(self, db: AsyncSession, id: Any) -> Optional[T]:
        """
        Get an entity by its primary key.

        Args:
            db: Database session
            id: Entity ID

        Returns:
            The entity if found, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        try:
            return await db.get(self.model_type, id)
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving {self.model_type.__name__} with id {id}: {e}")
            raise RepositoryError(f"Database error retrieving entity: {e}") from e

    async def create(self, db: AsyncSession, data: Union[CreateSchemaType, Dict[str, Any]]) -> T:
        """
        Add a new entity and flush it so its generated columns are populated.

        The caller owns the transaction; nothing is committed here.

        Args:
            db: Database session
            data: Entity data (either as a Pydantic model or dictionary)

        Returns:
            The created entity

        Raises:
            RepositoryError: On database errors
        """
        try:
            entity = self.model_type(**_as_dict(data))
            db.add(entity)
            await db.flush()
            await db.refresh(entity)
            return entity
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model_type.__name__}: {e}")
            await db.rollback()
            raise RepositoryError(f"Database error creating entity: {e}") from e

    async def update(
        self,
        db: AsyncSession,
        id: Any,
        data: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> Optional[T]:
        """
        Apply the set fields of ``data`` to an existing entity.

        Args:
            db: Database session
            id: Entity ID
            data: Updated entity data; only explicitly set fields are written

        Returns:
            The updated entity, or None if not found

        Raises:
            RepositoryError: On database errors
        """
        try:
            entity = await self.get_by_id(db, id)
            if entity is None:
                return None

            for key, value in _as_dict(data).items():
                setattr(entity, key, value)

            await db.flush()
            await db.refresh(entity)
            return entity
        except SQLAlchemyError as e:
            logger.error(f"Error updating {self.model_type.__name__} with id {id}: {e}")
            raise RepositoryError(f"Database error updating entity: {e}") from e

    async def delete(self, db: AsyncSession, id: Any) -> bool:
        """
        Delete an entity by ID.

        Returns:
            True if the entity was deleted, False if not found

        Raises:
            RepositoryError: On database errors
        """
        try:
            entity = await self.get_by_id(db, id)
            if entity is None:
                return False

            await db.delete(entity)
            await db.flush()
            return True
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {self.model_type.__name__} with id {id}: {e}")
            raise RepositoryError(f"Database error deleting entity: {e}") from e

    async def count(self, db: AsyncSession) -> int:
        try:
            query = select(func.count()).select_from(self.model_type)
            result = await db.execute(query)
            return result.scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error counting {self.model_type.__name__} records: {e}")
            raise RepositoryError(f"Database error counting entities: {e}") from e

    async def exists(self, db: AsyncSession, **kwargs) -> bool:
        """
        Check whether an entity matches all ``field=value`` filters.

        Raises:
            ValueError: If no filters are given
            RepositoryError: On database errors
        """
        conditions = [getattr(self.model_type, field) == value for field, value in kwargs.items()]
        if not conditions:
            raise ValueError("No conditions provided for exists check")

        try:
            query = select(func.count()).select_from(self.model_type).where(*conditions)
            result = await db.execute(query)
            return result.scalar_one() > 0
        except SQLAlchemyError as e:
            logger.error(f"Error checking existence of {self.model_type.__name__}: {e}")
            raise RepositoryError(f"Database error checking entity existence: {e}") from e
