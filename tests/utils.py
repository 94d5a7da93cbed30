"""Test utilities for shortcut manager tests."""

import random
import string
from typing import Any, Dict, List, Optional

from linkdeck.core.config import settings
from linkdeck.models.activity import Activity, ActivityLevel, ActivityType, SYSTEM_ACTOR_ID
from linkdeck.models.collection import Collection
from linkdeck.models.common import Role, Visibility
from linkdeck.models.shortcut import Shortcut
from linkdeck.models.user import User
from linkdeck.services.visibility import Actor

CHROME_ON_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
SAFARI_ON_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1"
)
FIREFOX_ON_LINUX = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
EDGE_ON_MAC = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.2210.91"
)
CHROME_ON_ANDROID = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
)


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    return f"https://{random_string(8).lower()}.com/{random_string(12)}"


def actor_for(user: User) -> Actor:
    return Actor(id=user.id, role=user.role)


def actor_headers(user: Optional[User]) -> Dict[str, str]:
    """Request headers identifying ``user``; anonymous when None."""
    if user is None:
        return {}
    return {settings.ACTOR_HEADER: str(user.id)}


async def create_test_user(db, username: Optional[str] = None, role: Role = Role.USER) -> User:
    """Create and persist a test user."""
    user = User(username=username or random_string(8), role=role)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def create_test_shortcut(
    db,
    creator: User,
    name: Optional[str] = None,
    visibility: Visibility = Visibility.PRIVATE,
    title: str = "",
    description: str = "",
    tags: Optional[List[str]] = None,
    **fields: Any,
) -> Shortcut:
    """Create and persist a test shortcut owned by ``creator``."""
    shortcut = Shortcut(
        creator_id=creator.id,
        name=name or random_string(6),
        link=fields.pop("link", random_url()),
        title=title,
        description=description,
        visibility=visibility,
        tag=" ".join(tags or []),
        **fields,
    )
    db.add(shortcut)
    await db.commit()
    await db.refresh(shortcut)
    return shortcut


async def create_test_collection(
    db,
    creator: User,
    name: Optional[str] = None,
    visibility: Visibility = Visibility.PRIVATE,
    shortcut_ids: Optional[List[int]] = None,
    title: str = "",
    description: str = "",
) -> Collection:
    """Create and persist a test collection owned by ``creator``."""
    collection = Collection(
        creator_id=creator.id,
        name=name or random_string(6),
        title=title,
        description=description,
        visibility=visibility,
        shortcut_ids=shortcut_ids or [],
    )
    db.add(collection)
    await db.commit()
    await db.refresh(collection)
    return collection


async def create_view_activity(
    db,
    shortcut_id: int,
    referer: str = "",
    user_agent: str = "",
    ip: str = "203.0.113.7",
) -> Activity:
    """Append a view activity for ``shortcut_id`` directly to the log."""
    activity = Activity(
        creator_id=SYSTEM_ACTOR_ID,
        type=ActivityType.SHORTCUT_VIEW,
        level=ActivityLevel.INFO,
        payload={
            "shortcut_id": shortcut_id,
            "ip": ip,
            "referer": referer,
            "user_agent": user_agent,
        },
    )
    db.add(activity)
    await db.commit()
    await db.refresh(activity)
    return activity
