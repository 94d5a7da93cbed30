"""Workspace setting data models."""

from enum import Enum

from sqlmodel import Field, SQLModel


class WorkspaceSettingKey(str, Enum):
    INSTANCE_URL = "instance_url"


class WorkspaceSetting(SQLModel, table=True):
    """Keyed singleton configuration row."""

    __tablename__ = "workspace_settings"

    key: str = Field(primary_key=True, max_length=64)
    value: str = Field(default="")
