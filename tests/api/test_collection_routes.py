"""Tests for the collection API routes."""

import pytest

from linkdeck.core.config import settings
from linkdeck.models import Visibility
from tests.utils import actor_headers, create_test_collection

BASE = f"{settings.API_PREFIX}{settings.API_VERSION_PREFIX}/collections"


@pytest.mark.api
class TestCollectionRoutes:

    @pytest.mark.asyncio
    async def test_create_and_fetch(self, client, owner):
        created = await client.post(
            BASE,
            json={"name": "team", "title": "Team", "shortcut_ids": [2, 1], "visibility": "PUBLIC"},
            headers=actor_headers(owner),
        )
        fetched = await client.get(f"{BASE}/team")

        assert created.status_code == 201
        assert fetched.status_code == 200
        assert fetched.json()["shortcut_ids"] == [2, 1]

    @pytest.mark.asyncio
    async def test_status_codes(self, client, test_db, owner, other_user):
        collection = await create_test_collection(test_db, owner, name="mine")

        assert (await client.get(f"{BASE}/nope")).status_code == 404
        assert (await client.get(f"{BASE}/mine", headers=actor_headers(other_user))).status_code == 403
        assert (await client.post(BASE, json={"name": "x"})).status_code == 403
        assert (
            await client.post(BASE, json={"name": "mine"}, headers=actor_headers(owner))
        ).status_code == 409
        assert (
            await client.patch(f"{BASE}/{collection.id}", json={}, headers=actor_headers(owner))
        ).status_code == 400

    @pytest.mark.asyncio
    async def test_update_and_delete(self, client, test_db, owner):
        collection = await create_test_collection(test_db, owner, name="list", visibility=Visibility.WORKSPACE)

        updated = await client.patch(
            f"{BASE}/{collection.id}",
            json={"update_mask": ["description"], "collection": {"description": "Now described", "title": "no"}},
            headers=actor_headers(owner),
        )
        deleted = await client.delete(f"{BASE}/list", headers=actor_headers(owner))
        gone = await client.get(f"{BASE}/list", headers=actor_headers(owner))

        assert updated.status_code == 200
        assert updated.json()["description"] == "Now described"
        assert updated.json()["title"] == ""
        assert deleted.status_code == 204
        assert gone.status_code == 404
