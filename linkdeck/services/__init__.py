"""Service layer for the shortcut manager.

This package contains service classes implementing the business logic of the application.
Services orchestrate interactions between repositories and provide domain-specific operations.
"""

from linkdeck.services.activity import ActivityRecorder
from linkdeck.services.analytics import AnalyticsService, parse_user_agent
from linkdeck.services.collection import CollectionService
from linkdeck.services.context import RequestContext
from linkdeck.services.metadata import Metadata, MetadataService
from linkdeck.services.shortcut import ShortcutService
from linkdeck.services.visibility import Actor, can_read, can_write

__all__ = [
    "ActivityRecorder",
    "Actor",
    "AnalyticsService",
    "CollectionService",
    "Metadata",
    "MetadataService",
    "RequestContext",
    "ShortcutService",
    "can_read",
    "can_write",
    "parse_user_agent",
]
