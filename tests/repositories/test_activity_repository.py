"""Tests for the append-only activity repository."""

import pytest

from linkdeck.models import ActivityCreate, ActivityLevel, ActivityType
from linkdeck.repositories import RepositoryError
from tests.utils import create_view_activity


@pytest.mark.repository
class TestActivityRepository:
    """Test suite for activity repository."""

    @pytest.mark.asyncio
    async def test_create_activity(self, test_db, activity_repository):
        activity = await activity_repository.create_activity(
            test_db,
            ActivityCreate(
                creator_id=3,
                type=ActivityType.SHORTCUT_CREATE,
                payload={"shortcut_id": 9},
            ),
        )

        assert activity.id is not None
        assert activity.level == ActivityLevel.INFO
        assert activity.payload == {"shortcut_id": 9}

    @pytest.mark.asyncio
    async def test_filters_by_type_and_shortcut(self, test_db, activity_repository):
        await create_view_activity(test_db, shortcut_id=1)
        await create_view_activity(test_db, shortcut_id=1)
        await create_view_activity(test_db, shortcut_id=2)
        await activity_repository.create_activity(
            test_db,
            ActivityCreate(creator_id=1, type=ActivityType.SHORTCUT_CREATE, payload={"shortcut_id": 1}),
        )

        views = await activity_repository.list_activities(
            test_db, type=ActivityType.SHORTCUT_VIEW, shortcut_id=1
        )
        assert len(views) == 2
        assert all(activity.payload["shortcut_id"] == 1 for activity in views)

        assert await activity_repository.count_activities(
            test_db, type=ActivityType.SHORTCUT_VIEW, shortcut_id=2
        ) == 1
        assert await activity_repository.count_activities(test_db, shortcut_id=1) == 3
        assert await activity_repository.count_activities(
            test_db, type=ActivityType.SHORTCUT_VIEW, shortcut_id=404
        ) == 0

    @pytest.mark.asyncio
    async def test_filter_by_level(self, test_db, activity_repository):
        await activity_repository.create_activity(
            test_db,
            ActivityCreate(
                creator_id=1,
                type=ActivityType.SHORTCUT_CREATE,
                level=ActivityLevel.WARN,
                payload={"shortcut_id": 1},
            ),
        )
        await create_view_activity(test_db, shortcut_id=1)

        warnings = await activity_repository.list_activities(test_db, level=ActivityLevel.WARN)

        assert [activity.type for activity in warnings] == [ActivityType.SHORTCUT_CREATE]

    @pytest.mark.asyncio
    async def test_activities_cannot_be_updated_or_deleted(self, test_db, activity_repository):
        activity = await create_view_activity(test_db, shortcut_id=1)

        with pytest.raises(RepositoryError):
            await activity_repository.update(test_db, activity.id, {"level": ActivityLevel.ERROR})
        with pytest.raises(RepositoryError):
            await activity_repository.delete(test_db, activity.id)

        assert await activity_repository.count(test_db) == 1
