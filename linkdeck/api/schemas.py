"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization. Entity read models live in linkdeck.models.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from linkdeck.models.collection import CollectionDraft
from linkdeck.models.shortcut import ShortcutDraft


class UpdateShortcutRequest(BaseModel):
    """Partial update: only the fields named in ``update_mask`` are applied."""
    update_mask: List[str] = Field(default_factory=list)
    shortcut: ShortcutDraft = Field(default_factory=ShortcutDraft)


class UpdateCollectionRequest(BaseModel):
    """Partial update: only the fields named in ``update_mask`` are applied."""
    update_mask: List[str] = Field(default_factory=list)
    collection: CollectionDraft = Field(default_factory=CollectionDraft)


class ErrorResponse(BaseModel):
    """Response schema for errors."""
    detail: str
    error_code: Optional[str] = None  # Machine-readable error code
    field_errors: Optional[Dict[str, List[str]]] = None  # For validation errors
