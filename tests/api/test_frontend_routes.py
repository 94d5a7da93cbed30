"""Tests for frontend pages, crawler documents and health checks."""

import pytest

from linkdeck.core.config import settings
from linkdeck.models import Visibility, WorkspaceSettingKey
from tests.utils import create_test_collection, create_test_shortcut

SHORTCUT_PAGE = f"/{settings.SHORTCUT_PATH_PREFIX}"
COLLECTION_PAGE = f"/{settings.COLLECTION_PATH_PREFIX}"


async def configure_instance_url(db, setting_repository, value="https://links.example"):
    await setting_repository.upsert_setting(db, WorkspaceSettingKey.INSTANCE_URL.value, value)
    await db.commit()


@pytest.mark.api
class TestPages:

    @pytest.mark.asyncio
    async def test_public_shortcut_page_has_preview(self, client, test_db, owner):
        await create_test_shortcut(
            test_db, owner, name="docs", visibility=Visibility.PUBLIC, title="Docs & Guides"
        )

        response = await client.get(f"{SHORTCUT_PAGE}/docs")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "<title>Docs &amp; Guides</title>" in response.text
        assert settings.METADATA_PLACEHOLDER not in response.text

    @pytest.mark.asyncio
    async def test_private_shortcut_page_is_plain(self, client, test_db, owner):
        await create_test_shortcut(test_db, owner, name="secret", title="Do not leak")

        response = await client.get(f"{SHORTCUT_PAGE}/secret")

        assert response.status_code == 200
        assert "Do not leak" not in response.text
        assert f"<title>{settings.DEFAULT_METADATA_TITLE}</title>" in response.text

    @pytest.mark.asyncio
    async def test_missing_shortcut_page_is_plain(self, client):
        response = await client.get(f"{SHORTCUT_PAGE}/nothing-here")

        assert response.status_code == 200
        assert f"<title>{settings.DEFAULT_METADATA_TITLE}</title>" in response.text

    @pytest.mark.asyncio
    async def test_collection_page(self, client, test_db, owner):
        await create_test_collection(test_db, owner, name="shelf", visibility=Visibility.PUBLIC, title="Shelf")

        response = await client.get(f"{COLLECTION_PAGE}/shelf")

        assert "<title>Shelf</title>" in response.text


@pytest.mark.api
class TestCrawlerDocuments:

    @pytest.mark.asyncio
    async def test_not_found_without_instance_url(self, client):
        assert (await client.get("/robots.txt")).status_code == 404
        assert (await client.get("/sitemap.xml")).status_code == 404

    @pytest.mark.asyncio
    async def test_robots_txt(self, client, test_db, setting_repository):
        await configure_instance_url(test_db, setting_repository, "https://links.example/")

        response = await client.get("/robots.txt")

        assert response.status_code == 200
        assert response.text == (
            "User-agent: *\n"
            "Allow: /\n"
            "Host: https://links.example\n"
            "Sitemap: https://links.example/sitemap.xml"
        )

    @pytest.mark.asyncio
    async def test_sitemap_xml(self, client, test_db, setting_repository, owner):
        await configure_instance_url(test_db, setting_repository)
        await create_test_shortcut(test_db, owner, name="open", visibility=Visibility.PUBLIC)

        response = await client.get("/sitemap.xml")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert f"https://links.example/{settings.SHORTCUT_PATH_PREFIX}/open" in response.text


@pytest.mark.api
class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get(f"{settings.API_PREFIX}/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["components"]["database"]["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_probes(self, client):
        ready = await client.get(f"{settings.API_PREFIX}/health/ready")
        live = await client.get(f"{settings.API_PREFIX}/health/live")

        assert ready.json() == {"ready": True, "components": {"api": True, "database": True}}
        assert live.json() == {"alive": True}
