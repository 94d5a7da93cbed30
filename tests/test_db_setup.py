"""Basic tests to verify test DB setup."""

from datetime import timedelta, timezone

import pytest
from sqlalchemy import select, text

from linkdeck.models import (
    SYSTEM_ACTOR_ID,
    Activity,
    ActivityType,
    Collection,
    Shortcut,
    ShortcutUpdate,
    User,
)
from linkdeck.models.common import utcnow


@pytest.mark.asyncio
async def test_table_exists(test_engine):
    """Verify every table is created in the test database."""
    async with test_engine.connect() as conn:
        result = await conn.execute(text("SELECT name FROM sqlite_master WHERE type='table'"))
        tables = {row[0] for row in result.fetchall()}

    assert {"users", "shortcuts", "collections", "activities", "workspace_settings"} <= tables


@pytest.mark.asyncio
async def test_create_and_read_shortcut(test_db):
    """Verify a row round-trips through the test database."""
    user = User(username="setup")
    test_db.add(user)
    await test_db.commit()

    shortcut = Shortcut(
        creator_id=user.id,
        name="docs",
        link="https://example.com/docs",
        tag="guide reference",
    )
    test_db.add(shortcut)
    await test_db.commit()

    result = await test_db.execute(select(Shortcut).where(Shortcut.name == "docs"))
    retrieved = result.scalars().first()

    assert retrieved is not None
    assert retrieved.link == "https://example.com/docs"
    assert retrieved.tag_list() == ["guide", "reference"]


def test_default_timestamps_are_timezone_aware():
    """Timestamps are generated as aware UTC datetimes."""
    shortcut = Shortcut(creator_id=1, name="tz", link="https://example.com")
    entities = [
        shortcut,
        User(username="tz"),
        Collection(creator_id=1, name="tz"),
        Activity(creator_id=SYSTEM_ACTOR_ID, type=ActivityType.SHORTCUT_VIEW),
    ]

    for entity in entities:
        assert entity.created_at.utcoffset() == timedelta(0)
    assert shortcut.updated_at.tzinfo is not None
    assert utcnow().tzinfo is timezone.utc


@pytest.mark.asyncio
async def test_rows_with_aware_timestamps_round_trip(test_db, shortcut_repository):
    """Every table accepts its generated timestamps on insert and update."""
    user = User(username="writer")
    test_db.add(user)
    await test_db.flush()
    collection = Collection(creator_id=user.id, name="writes")
    activity = Activity(creator_id=user.id, type=ActivityType.SHORTCUT_CREATE, payload={"shortcut_id": 1})
    shortcut = Shortcut(creator_id=user.id, name="writes", link="https://example.com")
    test_db.add_all([collection, activity, shortcut])
    await test_db.commit()

    updated = await shortcut_repository.apply_patch(
        test_db, shortcut, ShortcutUpdate(title="Renamed")
    )
    await test_db.commit()

    assert updated.title == "Renamed"
    assert updated.updated_at is not None
