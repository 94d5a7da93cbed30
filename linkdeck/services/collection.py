"""Collection resolver."""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from linkdeck.db.session import db_transaction
from linkdeck.models.collection import (
    Collection,
    CollectionCreate,
    CollectionDraft,
    CollectionRead,
    CollectionUpdate,
)
from linkdeck.models.common import Visibility
from linkdeck.repositories.base import RepositoryError, DuplicateEntityError
from linkdeck.repositories.collection_repository import CollectionRepository
from linkdeck.services.exceptions import (
    AlreadyExistsError,
    CollectionNotFoundError,
    InternalError,
    InvalidArgumentError,
    PermissionDeniedError,
)
from linkdeck.services.visibility import Actor, can_read, can_write

logger = logging.getLogger(__name__)


class CollectionService:
    """
    Service for collection business logic.

    Collections follow the same visibility policy as shortcuts but keep no
    activity trail.
    """

    def __init__(self, collection_repository: CollectionRepository):
        self.collection_repository = collection_repository

    async def _find(self, db: AsyncSession, name: Optional[str] = None, collection_id: Optional[int] = None) -> Collection:
        try:
            if name is not None:
                collection = await self.collection_repository.get_by_name(db, name)
            else:
                collection = await self.collection_repository.get_by_id(db, collection_id)
        except RepositoryError as e:
            logger.error(f"Error retrieving collection: {e}")
            raise InternalError("Failed to retrieve collection") from e
        if collection is None:
            key = f"'{name}'" if name is not None else f"with id {collection_id}"
            raise CollectionNotFoundError(f"Collection {key} not found")
        return collection

    async def list_collections(self, db: AsyncSession, actor: Optional[Actor]) -> List[CollectionRead]:
        """
        List the collections visible to ``actor``.

        Raises:
            InternalError: On store failures
        """
        try:
            if actor is None:
                collections = await self.collection_repository.list_collections(
                    db, visibilities=[Visibility.PUBLIC]
                )
            else:
                collections = await self.collection_repository.list_collections(
                    db,
                    visibilities=[Visibility.WORKSPACE, Visibility.PUBLIC],
                    creator_id=actor.id,
                )
        except RepositoryError as e:
            logger.error(f"Error listing collections: {e}")
            raise InternalError("Failed to list collections") from e

        unique = {collection.id: collection for collection in collections}
        return [CollectionRead.model_validate(collection) for collection in unique.values()]

    async def get_collection(self, db: AsyncSession, name: str, actor: Optional[Actor]) -> CollectionRead:
        """
        Get a collection by its exact name.

        Raises:
            CollectionNotFoundError: If no collection has this name
            PermissionDeniedError: If the actor may not read it
        """
        collection = await self._find(db, name=name)
        if not can_read(actor, collection):
            raise PermissionDeniedError(f"Not allowed to read collection '{name}'")
        return CollectionRead.model_validate(collection)

    async def get_collection_by_id(
        self,
        db: AsyncSession,
        collection_id: int,
        actor: Optional[Actor]
    ) -> CollectionRead:
        collection = await self._find(db, collection_id=collection_id)
        if not can_read(actor, collection):
            raise PermissionDeniedError(f"Not allowed to read collection {collection_id}")
        return CollectionRead.model_validate(collection)

    @db_transaction(db_param_name="db")
    async def create_collection(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        draft: CollectionCreate,
    ) -> CollectionRead:
        """
        Create a collection owned by ``actor``.

        Raises:
            PermissionDeniedError: If the caller is anonymous
            AlreadyExistsError: If the name is already taken
            InternalError: On store failures
        """
        if actor is None:
            raise PermissionDeniedError("Anonymous callers cannot create collections")

        try:
            collection = await self.collection_repository.create_collection(db, actor.id, draft)
        except DuplicateEntityError as e:
            raise AlreadyExistsError(f"Collection '{draft.name}' already exists") from e
        except RepositoryError as e:
            logger.error(f"Error creating collection: {e}")
            raise InternalError("Failed to create collection") from e

        logger.info(f"Created collection '{collection.name}' (id={collection.id}) for user {actor.id}")
        return CollectionRead.model_validate(collection)

    @db_transaction(db_param_name="db")
    async def update_collection(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        collection_id: int,
        update_mask: Sequence[str],
        draft: CollectionDraft,
    ) -> CollectionRead:
        """
        Update the fields of a collection named by ``update_mask``.

        Raises:
            InvalidArgumentError: If ``update_mask`` is empty or clears the name
            CollectionNotFoundError: If no collection has this id
            PermissionDeniedError: If the actor is neither owner nor admin
            AlreadyExistsError: If the update renames onto a taken name
            InternalError: On store failures
        """
        if not update_mask:
            raise InvalidArgumentError("update_mask is required")

        collection = await self._find(db, collection_id=collection_id)
        if not can_write(actor, collection):
            raise PermissionDeniedError(f"Not allowed to update collection {collection_id}")

        try:
            patch = CollectionUpdate.from_mask(update_mask, draft)
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from e

        try:
            collection = await self.collection_repository.apply_patch(db, collection, patch)
        except DuplicateEntityError as e:
            raise AlreadyExistsError(f"Collection '{patch.name}' already exists") from e
        except RepositoryError as e:
            logger.error(f"Error updating collection {collection_id}: {e}")
            raise InternalError("Failed to update collection") from e

        return CollectionRead.model_validate(collection)

    @db_transaction(db_param_name="db")
    async def delete_collection(self, db: AsyncSession, actor: Optional[Actor], name: str) -> None:
        """
        Delete a collection by name. Member shortcuts are not affected.

        Raises:
            CollectionNotFoundError: If no collection has this name
            PermissionDeniedError: If the actor is neither owner nor admin
            InternalError: On store failures
        """
        collection = await self._find(db, name=name)
        if not can_write(actor, collection):
            raise PermissionDeniedError(f"Not allowed to delete collection '{name}'")

        try:
            await self.collection_repository.delete(db, collection.id)
        except RepositoryError as e:
            logger.error(f"Error deleting collection {collection.id}: {e}")
            raise InternalError("Failed to delete collection") from e
