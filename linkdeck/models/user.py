"""User data models."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from linkdeck.models.common import Role, RowStatus, utcnow


class UserBase(SQLModel):
    """Base model for user data."""

    username: str = Field(
        unique=True,
        max_length=64,
        description="Unique login name"
    )
    nickname: str = Field(default="", max_length=64)
    email: str = Field(default="", max_length=256)
    role: Role = Field(default=Role.USER)


class User(UserBase, table=True):
    """
    Workspace member.

    Users are created by the session/identity collaborator; this service
    only reads them to resolve the acting user and their role.
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    row_status: RowStatus = Field(default=RowStatus.NORMAL)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class UserCreate(UserBase):
    """Schema for creating a user."""
    pass
