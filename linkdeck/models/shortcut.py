"""Shortcut data models.

This module defines the Shortcut table, its request drafts, the
per-field update struct built from a field mask, and the read schema.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import DateTime, Index, text
from sqlmodel import Field, SQLModel

from linkdeck.models.common import RowStatus, Visibility, utcnow

logger = logging.getLogger(__name__)


class OpenGraphMetadata(SQLModel):
    """Optional social-preview override for a shortcut."""

    title: str = ""
    description: str = ""
    image: str = ""


class ShortcutBase(SQLModel):
    """Base model for shortcut data."""

    name: str = Field(
        max_length=256,
        description="Unique name used in the short link path"
    )
    link: str = Field(description="Target link the shortcut points to")
    title: str = Field(default="", max_length=256)
    description: str = Field(default="")
    visibility: Visibility = Field(default=Visibility.PRIVATE)


class Shortcut(ShortcutBase, table=True):
    """
    Shortcut model for storing named links.

    Tags are stored as one whitespace-separated string. The name is unique
    among NORMAL rows through a partial unique index; archived rows may keep
    a name that has since been reused.
    """

    __tablename__ = "shortcuts"

    id: Optional[int] = Field(default=None, primary_key=True)
    creator_id: int = Field(foreign_key="users.id", index=True)
    tag: str = Field(default="", description="Tags joined by single spaces")
    og_title: str = Field(default="")
    og_description: str = Field(default="")
    og_image: str = Field(default="")
    row_status: RowStatus = Field(default=RowStatus.NORMAL)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    __table_args__ = (
        Index("ix_shortcuts_name_row_status", "name", "row_status"),
        Index(
            "uq_shortcuts_live_name",
            "name",
            unique=True,
            postgresql_where=text("row_status = 'NORMAL'"),
            sqlite_where=text("row_status = 'NORMAL'"),
        ),
        Index("ix_shortcuts_visibility", "visibility"),
    )

    def tag_list(self) -> List[str]:
        return self.tag.split()

    def og_metadata(self) -> OpenGraphMetadata:
        return OpenGraphMetadata(
            title=self.og_title,
            description=self.og_description,
            image=self.og_image,
        )


class ShortcutDraft(SQLModel):
    """Client-submitted shortcut payload.

    For updates only the fields named in the update mask are read.
    """

    name: str = ""
    link: str = ""
    title: str = ""
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    visibility: Visibility = Visibility.PRIVATE
    og_metadata: Optional[OpenGraphMetadata] = None


class ShortcutCreate(ShortcutDraft):
    """Schema for creating a new shortcut."""

    name: str = Field(min_length=1, max_length=256)
    link: str = Field(min_length=1)


class ShortcutUpdate(SQLModel):
    """Explicit per-field update; unset fields are left untouched."""

    name: Optional[str] = None
    link: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    visibility: Optional[Visibility] = None
    og_metadata: Optional[OpenGraphMetadata] = None

    @classmethod
    def from_mask(cls, update_mask: Sequence[str], draft: ShortcutDraft) -> "ShortcutUpdate":
        """Translate a field mask over ``draft`` into an update.

        Unknown paths are ignored. ``og_metadata`` is only set when the
        draft carries one.

        Raises:
            ValueError: If the mask names ``name`` and the draft has none
        """
        values = {}
        for path in update_mask:
            if path == "name" and not draft.name.strip():
                raise ValueError("name must not be empty")
            if path in ("name", "link", "title", "description", "visibility"):
                values[path] = getattr(draft, path)
            elif path == "tags":
                # Normalise through the stored form so "a b" and ["a", "b"] agree
                values["tags"] = " ".join(draft.tags).split()
            elif path == "og_metadata":
                if draft.og_metadata is not None:
                    values["og_metadata"] = draft.og_metadata
            else:
                logger.debug(f"Ignoring unknown shortcut update path {path!r}")
        return cls(**values)


class ShortcutRead(SQLModel):
    """Schema for reading a shortcut, including its derived view count."""

    id: int
    creator_id: int
    created_at: datetime
    updated_at: datetime
    row_status: RowStatus
    name: str
    link: str
    title: str
    description: str
    tags: List[str]
    visibility: Visibility
    og_metadata: OpenGraphMetadata
    view_count: int = 0

    @classmethod
    def from_entity(cls, shortcut: Shortcut, view_count: int) -> "ShortcutRead":
        return cls(
            id=shortcut.id,
            creator_id=shortcut.creator_id,
            created_at=shortcut.created_at,
            updated_at=shortcut.updated_at,
            row_status=shortcut.row_status,
            name=shortcut.name,
            link=shortcut.link,
            title=shortcut.title,
            description=shortcut.description,
            tags=shortcut.tag_list(),
            visibility=shortcut.visibility,
            og_metadata=shortcut.og_metadata(),
            view_count=view_count,
        )
