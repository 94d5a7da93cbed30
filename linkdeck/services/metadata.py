"""Metadata synthesizer.

Builds link-preview tags for shortcut and collection pages, plus the
robots.txt and sitemap.xml documents published once the workspace has an
instance URL.
"""

import html
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from xml.sax.saxutils import escape as xml_escape

from sqlalchemy.ext.asyncio import AsyncSession

from linkdeck.core.config import settings
from linkdeck.models.collection import Collection
from linkdeck.models.common import Visibility
from linkdeck.models.shortcut import Shortcut
from linkdeck.models.workspace_setting import WorkspaceSettingKey
from linkdeck.repositories.base import RepositoryError
from linkdeck.repositories.collection_repository import CollectionRepository
from linkdeck.repositories.shortcut_repository import ShortcutRepository
from linkdeck.repositories.workspace_setting_repository import WorkspaceSettingRepository
from linkdeck.services.exceptions import InternalError

logger = logging.getLogger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"

DEFAULT_INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    {placeholder}
  </head>
  <body>
    <div id="root"></div>
  </body>
</html>
"""


@lru_cache(maxsize=1)
def load_index_html() -> str:
    """Return the frontend index page, read once per process.

    Falls back to a minimal shell carrying the metadata placeholder when no
    built frontend is configured.
    """
    if settings.FRONTEND_INDEX_PATH:
        return Path(settings.FRONTEND_INDEX_PATH).read_text(encoding="utf-8")
    return DEFAULT_INDEX_HTML.format(placeholder=settings.METADATA_PLACEHOLDER)


@dataclass
class Metadata:
    """Preview fields rendered into the page head."""

    title: str = ""
    description: str = ""
    image: str = ""

    @classmethod
    def default(cls) -> "Metadata":
        return cls(title=settings.DEFAULT_METADATA_TITLE)

    def tags(self) -> List[str]:
        title = html.escape(self.title)
        description = html.escape(self.description)
        image = html.escape(self.image)
        return [
            f"<title>{title}</title>",
            f'<meta name="description" content="{description}" />',
            f'<meta property="og:title" content="{title}" />',
            f'<meta property="og:description" content="{description}" />',
            f'<meta property="og:image" content="{image}" />',
            '<meta property="og:type" content="website" />',
            f'<meta property="twitter:title" content="{title}" />',
            f'<meta property="twitter:description" content="{description}" />',
            f'<meta property="twitter:image" content="{image}" />',
        ]

    def render(self) -> str:
        return "\n".join(self.tags())

    def inject(self, index_html: str) -> str:
        """Replace the metadata placeholder of ``index_html`` with the rendered tags."""
        return index_html.replace(settings.METADATA_PLACEHOLDER, self.render())


class MetadataService:
    """
    Service deriving preview metadata and crawler documents from stored entities.

    Only public shortcuts and collections are described; anything else is
    served the plain index page.
    """

    def __init__(
        self,
        shortcut_repository: ShortcutRepository,
        collection_repository: CollectionRepository,
        setting_repository: WorkspaceSettingRepository,
    ):
        self.shortcut_repository = shortcut_repository
        self.collection_repository = collection_repository
        self.setting_repository = setting_repository

    @staticmethod
    def shortcut_metadata(shortcut: Shortcut) -> Metadata:
        """
        Build preview metadata for a shortcut.

        The OpenGraph override wins field by field: an empty override field
        falls back to the shortcut's own value.
        """
        og = shortcut.og_metadata()
        return Metadata(
            title=og.title or shortcut.title,
            description=og.description or shortcut.description,
            image=og.image,
        )

    @staticmethod
    def collection_metadata(collection: Collection) -> Metadata:
        return Metadata(
            title=collection.title,
            description=collection.description,
        )

    async def shortcut_page(self, db: AsyncSession, name: str) -> Optional[Metadata]:
        """Metadata for the public shortcut ``name``, or None when there is none."""
        try:
            shortcut = await self.shortcut_repository.get_by_name(db, name)
        except RepositoryError as e:
            raise InternalError("Failed to retrieve shortcut") from e
        if shortcut is None or shortcut.visibility != Visibility.PUBLIC:
            return None
        return self.shortcut_metadata(shortcut)

    async def collection_page(self, db: AsyncSession, name: str) -> Optional[Metadata]:
        """Metadata for the public collection ``name``, or None when there is none."""
        try:
            collection = await self.collection_repository.get_by_name(db, name)
        except RepositoryError as e:
            raise InternalError("Failed to retrieve collection") from e
        if collection is None or collection.visibility != Visibility.PUBLIC:
            return None
        return self.collection_metadata(collection)

    async def instance_url(self, db: AsyncSession) -> Optional[str]:
        """
        Read the configured instance base URL.

        Returns:
            The URL without a trailing slash, or None when unset or empty

        Raises:
            InternalError: If the setting cannot be read
        """
        try:
            setting = await self.setting_repository.get_setting(db, WorkspaceSettingKey.INSTANCE_URL.value)
        except RepositoryError as e:
            logger.error(f"Error reading instance URL setting: {e}")
            raise InternalError("Failed to read workspace settings") from e
        if setting is None or not setting.value.strip():
            return None
        return setting.value.strip().rstrip("/")

    @staticmethod
    def robots_txt(instance_url: str) -> str:
        return (
            "User-agent: *\n"
            "Allow: /\n"
            f"Host: {instance_url}\n"
            f"Sitemap: {instance_url}/sitemap.xml"
        )

    async def sitemap_xml(self, db: AsyncSession, instance_url: str) -> str:
        """
        List every public shortcut and public collection as a sitemap.

        Args:
            db: Database session
            instance_url: Base URL the entries are rooted at

        Raises:
            InternalError: If the entities cannot be listed
        """
        try:
            shortcuts = await self.shortcut_repository.list_shortcuts(db, visibilities=[Visibility.PUBLIC])
            collections = await self.collection_repository.list_collections(db, visibilities=[Visibility.PUBLIC])
        except RepositoryError as e:
            logger.error(f"Error listing public entities for sitemap: {e}")
            raise InternalError("Failed to build sitemap") from e

        locations = [
            f"{instance_url}/{settings.SHORTCUT_PATH_PREFIX}/{shortcut.name}" for shortcut in shortcuts
        ] + [
            f"{instance_url}/{settings.COLLECTION_PATH_PREFIX}/{collection.name}" for collection in collections
        ]
        entries = "\n".join(f"<url><loc>{xml_escape(loc)}</loc></url>" for loc in locations)
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<urlset xmlns="{SITEMAP_NAMESPACE}">{entries}</urlset>'
        )
