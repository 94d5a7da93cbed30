"""Collection data models."""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel

from linkdeck.models.common import Visibility, utcnow

logger = logging.getLogger(__name__)


class CollectionBase(SQLModel):
    """Base model for collection data."""

    name: str = Field(unique=True, max_length=256)
    title: str = Field(default="", max_length=256)
    description: str = Field(default="")
    visibility: Visibility = Field(default=Visibility.PRIVATE)


class Collection(CollectionBase, table=True):
    """
    Named, ordered grouping of shortcuts.

    Member ids are stored in order and are not foreign keys: a deleted
    shortcut simply stops resolving.
    """

    __tablename__ = "collections"

    id: Optional[int] = Field(default=None, primary_key=True)
    creator_id: int = Field(foreign_key="users.id", index=True)
    shortcut_ids: List[int] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False)
    )
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class CollectionDraft(SQLModel):
    """Client-submitted collection payload."""

    name: str = ""
    title: str = ""
    description: str = ""
    visibility: Visibility = Visibility.PRIVATE
    shortcut_ids: List[int] = Field(default_factory=list)


class CollectionCreate(CollectionDraft):
    """Schema for creating a new collection."""

    name: str = Field(min_length=1, max_length=256)


class CollectionUpdate(SQLModel):
    """Explicit per-field update; unset fields are left untouched."""

    name: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    visibility: Optional[Visibility] = None
    shortcut_ids: Optional[List[int]] = None

    @classmethod
    def from_mask(cls, update_mask: Sequence[str], draft: CollectionDraft) -> "CollectionUpdate":
        """Translate a field mask over ``draft`` into an update.

        Raises:
            ValueError: If the mask names ``name`` and the draft has none
        """
        values = {}
        for path in update_mask:
            if path == "name" and not draft.name.strip():
                raise ValueError("name must not be empty")
            if path in cls.model_fields:
                values[path] = getattr(draft, path)
            else:
                logger.debug(f"Ignoring unknown collection update path {path!r}")
        return cls(**values)


class CollectionRead(SQLModel):
    """Schema for reading a collection."""

    id: int
    creator_id: int
    created_at: datetime
    updated_at: datetime
    name: str
    title: str
    description: str
    visibility: Visibility
    shortcut_ids: List[int]
