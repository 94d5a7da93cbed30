"""
Data models for the shortcut manager.

This module imports and exports all SQLModel models used in the application.
"""

from sqlmodel import SQLModel

from linkdeck.models.common import Role, RowStatus, Visibility
from linkdeck.models.user import User, UserBase, UserCreate
from linkdeck.models.shortcut import (
    OpenGraphMetadata,
    Shortcut,
    ShortcutBase,
    ShortcutCreate,
    ShortcutDraft,
    ShortcutRead,
    ShortcutUpdate,
)
from linkdeck.models.collection import (
    Collection,
    CollectionBase,
    CollectionCreate,
    CollectionDraft,
    CollectionRead,
    CollectionUpdate,
)
from linkdeck.models.activity import (
    SYSTEM_ACTOR_ID,
    Activity,
    ActivityCreate,
    ActivityLevel,
    ActivityType,
    ShortcutCreatePayload,
    ShortcutViewPayload,
)
from linkdeck.models.workspace_setting import WorkspaceSetting, WorkspaceSettingKey
from linkdeck.models.analytics import AnalyticsItem, ShortcutAnalyticsRead

__all__ = [
    "SQLModel",
    # Enumerations
    "Role",
    "RowStatus",
    "Visibility",
    # Users
    "User",
    "UserBase",
    "UserCreate",
    # Shortcuts
    "OpenGraphMetadata",
    "Shortcut",
    "ShortcutBase",
    "ShortcutCreate",
    "ShortcutDraft",
    "ShortcutRead",
    "ShortcutUpdate",
    # Collections
    "Collection",
    "CollectionBase",
    "CollectionCreate",
    "CollectionDraft",
    "CollectionRead",
    "CollectionUpdate",
    # Activities
    "SYSTEM_ACTOR_ID",
    "Activity",
    "ActivityCreate",
    "ActivityLevel",
    "ActivityType",
    "ShortcutCreatePayload",
    "ShortcutViewPayload",
    # Workspace settings
    "WorkspaceSetting",
    "WorkspaceSettingKey",
    # Analytics
    "AnalyticsItem",
    "ShortcutAnalyticsRead",
]
