"""Repository layer for the shortcut manager.

This module provides repository classes that abstract database operations
and implement the Repository pattern for clean separation of concerns.
"""

from linkdeck.repositories.base import (
    BaseRepository,
    RepositoryError,
    DuplicateEntityError
)
from linkdeck.repositories.shortcut_repository import ShortcutRepository
from linkdeck.repositories.collection_repository import CollectionRepository
from linkdeck.repositories.user_repository import UserRepository
from linkdeck.repositories.activity_repository import ActivityRepository
from linkdeck.repositories.workspace_setting_repository import WorkspaceSettingRepository

__all__ = [
    # Base classes and exceptions
    "BaseRepository",
    "RepositoryError",
    "DuplicateEntityError",

    # Concrete repositories
    "ShortcutRepository",
    "CollectionRepository",
    "UserRepository",
    "ActivityRepository",
    "WorkspaceSettingRepository",
]
