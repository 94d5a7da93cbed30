"""Tests for the shortcut resolver."""

import pytest
from unittest.mock import patch

from linkdeck.models import (
    ActivityType,
    OpenGraphMetadata,
    ShortcutCreate,
    ShortcutDraft,
    Visibility,
)
from linkdeck.repositories import RepositoryError
from linkdeck.services import RequestContext
from linkdeck.services.exceptions import (
    AlreadyExistsError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    ShortcutNotFoundError,
)
from tests.utils import create_test_shortcut, create_view_activity

CONTEXT = RequestContext(peer="198.51.100.4", referer="https://news.example", user_agent="curl/8.4.0")


@pytest.mark.service
class TestListShortcuts:

    @pytest.mark.asyncio
    async def test_member_sees_shared_and_own_private(
        self, test_db, shortcut_service, owner, other_user, owner_actor
    ):
        mine = await create_test_shortcut(test_db, owner, visibility=Visibility.PRIVATE)
        await create_test_shortcut(test_db, other_user, visibility=Visibility.PRIVATE)
        shared = await create_test_shortcut(test_db, other_user, visibility=Visibility.WORKSPACE)
        public = await create_test_shortcut(test_db, other_user, visibility=Visibility.PUBLIC)

        shortcuts = await shortcut_service.list_shortcuts(test_db, owner_actor)

        assert {s.id for s in shortcuts} == {mine.id, shared.id, public.id}
        assert len(shortcuts) == 3

    @pytest.mark.asyncio
    async def test_anonymous_sees_public_only(self, test_db, shortcut_service, owner):
        await create_test_shortcut(test_db, owner, visibility=Visibility.WORKSPACE)
        public = await create_test_shortcut(test_db, owner, visibility=Visibility.PUBLIC)

        shortcuts = await shortcut_service.list_shortcuts(test_db, None)

        assert [s.id for s in shortcuts] == [public.id]

    @pytest.mark.asyncio
    async def test_store_failure_is_internal(self, test_db, shortcut_service, owner_actor):
        with patch.object(
            shortcut_service.shortcut_repository, "list_shortcuts", side_effect=RepositoryError("down")
        ):
            with pytest.raises(InternalError):
                await shortcut_service.list_shortcuts(test_db, owner_actor)


@pytest.mark.service
class TestGetShortcut:

    @pytest.mark.asyncio
    async def test_missing_name(self, test_db, shortcut_service, owner_actor):
        with pytest.raises(ShortcutNotFoundError):
            await shortcut_service.get_shortcut(test_db, "missing", owner_actor)

    @pytest.mark.asyncio
    async def test_private_denied_to_other_member(self, test_db, shortcut_service, owner, other_actor):
        await create_test_shortcut(test_db, owner, name="secret")

        with pytest.raises(PermissionDeniedError):
            await shortcut_service.get_shortcut(test_db, "secret", other_actor)

    @pytest.mark.asyncio
    async def test_workspace_denied_to_anonymous(self, test_db, shortcut_service, owner):
        await create_test_shortcut(test_db, owner, name="team", visibility=Visibility.WORKSPACE)

        with pytest.raises(PermissionDeniedError):
            await shortcut_service.get_shortcut(test_db, "team", None)

    @pytest.mark.asyncio
    async def test_record_view_appends_activity(self, test_db, shortcut_service, activity_repository, owner):
        shortcut = await create_test_shortcut(test_db, owner, name="pub", visibility=Visibility.PUBLIC)

        first = await shortcut_service.get_shortcut(test_db, "pub", None, record_view=True, context=CONTEXT)
        second = await shortcut_service.get_shortcut(test_db, "pub", None)

        assert first.view_count == 0
        assert second.view_count == 1
        views = await activity_repository.list_activities(
            test_db, type=ActivityType.SHORTCUT_VIEW, shortcut_id=shortcut.id
        )
        assert views[0].payload == {
            "shortcut_id": shortcut.id,
            "ip": "198.51.100.4",
            "referer": "https://news.example",
            "user_agent": "curl/8.4.0",
        }

    @pytest.mark.asyncio
    async def test_view_recording_failure_does_not_fail_read(self, test_db, shortcut_service, owner, owner_actor):
        await create_test_shortcut(test_db, owner, name="mine", title="Mine")

        with patch.object(
            shortcut_service.recorder.activity_repository,
            "create_activity",
            side_effect=RepositoryError("log unavailable"),
        ):
            result = await shortcut_service.get_shortcut(
                test_db, "mine", owner_actor, record_view=True, context=CONTEXT
            )

        assert result.title == "Mine"

    @pytest.mark.asyncio
    async def test_missing_context_does_not_fail_read(self, test_db, shortcut_service, owner, owner_actor):
        await create_test_shortcut(test_db, owner, name="mine")

        result = await shortcut_service.get_shortcut(test_db, "mine", owner_actor, record_view=True)

        assert result.name == "mine"
        assert (await shortcut_service.get_shortcut(test_db, "mine", owner_actor)).view_count == 0


@pytest.mark.service
class TestCreateShortcut:

    @pytest.mark.asyncio
    async def test_round_trip(self, test_db, shortcut_service, owner_actor):
        draft = ShortcutCreate(
            name="handbook",
            link="https://example.com/handbook",
            title="Handbook",
            tags=["onboarding", "hr"],
            visibility=Visibility.WORKSPACE,
        )

        created = await shortcut_service.create_shortcut(test_db, owner_actor, draft)
        fetched = await shortcut_service.get_shortcut_by_id(test_db, created.id, owner_actor)

        assert fetched.name == draft.name
        assert fetched.link == draft.link
        assert fetched.title == draft.title
        assert fetched.tags == draft.tags
        assert fetched.visibility == draft.visibility
        assert fetched.creator_id == owner_actor.id
        assert fetched.view_count == 0

    @pytest.mark.asyncio
    async def test_records_creation_activity(self, test_db, shortcut_service, activity_repository, owner_actor):
        created = await shortcut_service.create_shortcut(
            test_db, owner_actor, ShortcutCreate(name="audited", link="https://example.com")
        )

        activities = await activity_repository.list_activities(test_db, type=ActivityType.SHORTCUT_CREATE)

        assert len(activities) == 1
        assert activities[0].creator_id == owner_actor.id
        assert activities[0].payload == {"shortcut_id": created.id}

    @pytest.mark.asyncio
    async def test_anonymous_cannot_create(self, test_db, shortcut_service):
        with pytest.raises(PermissionDeniedError):
            await shortcut_service.create_shortcut(
                test_db, None, ShortcutCreate(name="anon", link="https://example.com")
            )

    @pytest.mark.asyncio
    async def test_duplicate_name(self, test_db, shortcut_service, owner, owner_actor):
        await create_test_shortcut(test_db, owner, name="taken")

        with pytest.raises(AlreadyExistsError):
            await shortcut_service.create_shortcut(
                test_db, owner_actor, ShortcutCreate(name="taken", link="https://example.com")
            )

    @pytest.mark.asyncio
    async def test_audit_failure_fails_create_but_keeps_shortcut(
        self, test_db, shortcut_service, shortcut_repository, owner_actor
    ):
        with patch.object(
            shortcut_service.recorder.activity_repository,
            "create_activity",
            side_effect=RepositoryError("log unavailable"),
        ):
            with pytest.raises(InternalError):
                await shortcut_service.create_shortcut(
                    test_db, owner_actor, ShortcutCreate(name="orphan", link="https://example.com")
                )

        assert await shortcut_repository.get_by_name(test_db, "orphan") is not None


@pytest.mark.service
class TestUpdateShortcut:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("use_admin", [False, True])
    async def test_empty_mask_is_invalid(self, test_db, shortcut_service, owner, owner_actor, admin_actor, use_admin):
        shortcut = await create_test_shortcut(test_db, owner)
        actor = admin_actor if use_admin else owner_actor

        with pytest.raises(InvalidArgumentError):
            await shortcut_service.update_shortcut(test_db, actor, shortcut.id, [], ShortcutDraft(title="x"))

    @pytest.mark.asyncio
    async def test_empty_mask_checked_before_lookup(self, test_db, shortcut_service):
        with pytest.raises(InvalidArgumentError):
            await shortcut_service.update_shortcut(test_db, None, 999, [], ShortcutDraft())

    @pytest.mark.asyncio
    async def test_mask_is_authoritative(self, test_db, shortcut_service, owner, owner_actor):
        shortcut = await create_test_shortcut(
            test_db, owner, title="Original", description="Keep me", tags=["old"]
        )
        original_link = shortcut.link

        updated = await shortcut_service.update_shortcut(
            test_db,
            owner_actor,
            shortcut.id,
            ["tags"],
            ShortcutDraft(
                title="Distracting new title",
                description="Distracting",
                link="https://distracting.example",
                tags=["a", "b"],
            ),
        )

        assert updated.tags == ["a", "b"]
        assert updated.title == "Original"
        assert updated.description == "Keep me"
        assert updated.link == original_link

    @pytest.mark.asyncio
    async def test_og_metadata_kept_when_draft_has_none(self, test_db, shortcut_service, owner, owner_actor):
        shortcut = await create_test_shortcut(test_db, owner, og_title="Preview")

        updated = await shortcut_service.update_shortcut(
            test_db, owner_actor, shortcut.id, ["og_metadata", "visibility"],
            ShortcutDraft(visibility=Visibility.PUBLIC),
        )

        assert updated.og_metadata == OpenGraphMetadata(title="Preview")
        assert updated.visibility == Visibility.PUBLIC

    @pytest.mark.asyncio
    async def test_unknown_paths_are_ignored(self, test_db, shortcut_service, owner, owner_actor):
        shortcut = await create_test_shortcut(test_db, owner, title="Same")

        updated = await shortcut_service.update_shortcut(
            test_db, owner_actor, shortcut.id, ["creator_id", "view_count"], ShortcutDraft(title="Other")
        )

        assert updated.title == "Same"
        assert updated.creator_id == owner.id

    @pytest.mark.asyncio
    async def test_non_owner_denied_admin_allowed(
        self, test_db, shortcut_service, owner_actor, other_actor, admin_actor
    ):
        created = await shortcut_service.create_shortcut(
            test_db,
            owner_actor,
            ShortcutCreate(name="abc", link="https://example.com", visibility=Visibility.PRIVATE),
        )
        mask, draft = ["title"], ShortcutDraft(title="Renamed")

        with pytest.raises(PermissionDeniedError):
            await shortcut_service.update_shortcut(test_db, other_actor, created.id, mask, draft)

        updated = await shortcut_service.update_shortcut(test_db, admin_actor, created.id, mask, draft)
        assert updated.title == "Renamed"

    @pytest.mark.asyncio
    async def test_missing_shortcut(self, test_db, shortcut_service, owner_actor):
        with pytest.raises(ShortcutNotFoundError):
            await shortcut_service.update_shortcut(
                test_db, owner_actor, 12345, ["title"], ShortcutDraft(title="x")
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   "])
    async def test_rename_to_blank_name_is_invalid(self, test_db, shortcut_service, owner, owner_actor, name):
        shortcut = await create_test_shortcut(test_db, owner, name="keep-me")

        with pytest.raises(InvalidArgumentError):
            await shortcut_service.update_shortcut(
                test_db, owner_actor, shortcut.id, ["name", "title"], ShortcutDraft(name=name, title="t")
            )

        assert (await shortcut_service.get_shortcut(test_db, "keep-me", owner_actor)).title == ""

    @pytest.mark.asyncio
    async def test_rename_onto_taken_name(self, test_db, shortcut_service, owner, owner_actor):
        await create_test_shortcut(test_db, owner, name="taken")
        shortcut = await create_test_shortcut(test_db, owner, name="mine")

        with pytest.raises(AlreadyExistsError):
            await shortcut_service.update_shortcut(
                test_db, owner_actor, shortcut.id, ["name"], ShortcutDraft(name="taken")
            )


@pytest.mark.service
class TestDeleteShortcut:

    @pytest.mark.asyncio
    async def test_delete_keeps_activities(
        self, test_db, shortcut_service, activity_repository, owner, owner_actor
    ):
        shortcut = await create_test_shortcut(test_db, owner, name="gone")
        await create_view_activity(test_db, shortcut.id, referer="https://a.example")

        await shortcut_service.delete_shortcut(test_db, owner_actor, "gone")

        with pytest.raises(NotFoundError):
            await shortcut_service.get_shortcut_analytics(test_db, "gone")
        with pytest.raises(NotFoundError):
            await shortcut_service.get_shortcut_by_id(test_db, shortcut.id, owner_actor)
        assert await activity_repository.count_activities(test_db, shortcut_id=shortcut.id) == 1

    @pytest.mark.asyncio
    async def test_non_owner_cannot_delete(self, test_db, shortcut_service, owner, other_actor):
        await create_test_shortcut(test_db, owner, name="keep", visibility=Visibility.WORKSPACE)

        with pytest.raises(PermissionDeniedError):
            await shortcut_service.delete_shortcut(test_db, other_actor, "keep")

    @pytest.mark.asyncio
    async def test_missing_name(self, test_db, shortcut_service, owner_actor):
        with pytest.raises(ShortcutNotFoundError):
            await shortcut_service.delete_shortcut(test_db, owner_actor, "missing")


@pytest.mark.service
class TestShortcutAnalytics:

    @pytest.mark.asyncio
    async def test_emits_metric(self, test_db, shortcut_service, owner):
        await create_test_shortcut(test_db, owner, name="measured")

        with patch("linkdeck.services.shortcut.enqueue_metric") as enqueue:
            analytics = await shortcut_service.get_shortcut_analytics(test_db, "measured")

        enqueue.assert_called_once_with("shortcut analytics")
        assert analytics.references == []
