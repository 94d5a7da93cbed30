"""
Activity data models.

Activities are append-only typed facts. They serve as the audit trail and
as the ground truth for shortcut view counts and analytics.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import JSON, Column, DateTime, Index
from sqlmodel import Field, SQLModel

from linkdeck.models.common import utcnow

# Creator of activities triggered by anonymous callers
SYSTEM_ACTOR_ID = 0


class ActivityType(str, Enum):
    SHORTCUT_VIEW = "shortcut.view"
    SHORTCUT_CREATE = "shortcut.create"


class ActivityLevel(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class ShortcutViewPayload(BaseModel):
    """Payload of a shortcut view; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")

    shortcut_id: int
    ip: str = ""
    referer: str = ""
    user_agent: str = ""


class ShortcutCreatePayload(BaseModel):
    """Payload of a shortcut creation; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")

    shortcut_id: int


class ActivityBase(SQLModel):
    """Base model for activity data."""

    creator_id: int = Field(
        description="Actor who triggered the activity, or SYSTEM_ACTOR_ID"
    )
    type: ActivityType
    level: ActivityLevel = Field(default=ActivityLevel.INFO)


class Activity(ActivityBase, table=True):
    """
    Activity record.

    The payload references its shortcut by id only, without a foreign key;
    activities outlive the shortcuts they reference.
    """

    __tablename__ = "activities"

    id: Optional[int] = Field(default=None, primary_key=True)
    payload: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False)
    )
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    __table_args__ = (
        Index("ix_activities_type_level", "type", "level"),
        Index("ix_activities_created_at", "created_at"),
    )


class ActivityCreate(ActivityBase):
    """Schema for appending an activity."""

    payload: Dict[str, Any] = Field(default_factory=dict)
