"""Core module for the shortcut manager."""

from linkdeck.core.config import settings

__all__ = ["settings"]
