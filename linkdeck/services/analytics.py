"""Analytics aggregator.

Reduces a shortcut's view history into counts grouped by referer, operating
system family and browser family. Nothing is cached; every call rescans the
matching view activities.
"""

import logging
from collections import Counter
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from linkdeck.models.activity import ActivityType, ShortcutViewPayload
from linkdeck.models.analytics import AnalyticsItem, ShortcutAnalyticsRead
from linkdeck.repositories.activity_repository import ActivityRepository
from linkdeck.repositories.base import RepositoryError
from linkdeck.services.exceptions import InternalError

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

# Ordered (token, family) tables; the first token found in the user agent wins.
OS_TOKENS: Tuple[Tuple[str, str], ...] = (
    ("Windows Phone", "Windows Phone"),
    ("Windows", "Windows"),
    ("iPhone", "iOS"),
    ("iPad", "iOS"),
    ("iPod", "iOS"),
    ("CrOS", "Chrome OS"),
    ("Android", "Android"),
    ("Mac OS X", "Mac OS X"),
    ("Macintosh", "Mac OS X"),
    ("FreeBSD", "FreeBSD"),
    ("Linux", "Linux"),
)

BROWSER_TOKENS: Tuple[Tuple[str, str], ...] = (
    ("Googlebot", "Googlebot"),
    ("bingbot", "Bingbot"),
    ("Edg/", "Edge"),
    ("EdgA/", "Edge"),
    ("EdgiOS/", "Edge"),
    ("Edge/", "Edge"),
    ("OPR/", "Opera"),
    ("Opera", "Opera"),
    ("SamsungBrowser/", "Samsung Internet"),
    ("FxiOS/", "Firefox"),
    ("Firefox/", "Firefox"),
    ("CriOS/", "Chrome"),
    ("Chromium/", "Chromium"),
    ("Chrome/", "Chrome"),
    ("Safari/", "Safari"),
    ("Trident/", "Internet Explorer"),
    ("MSIE ", "Internet Explorer"),
    ("curl/", "curl"),
)


def _classify(user_agent: str, table: Tuple[Tuple[str, str], ...]) -> str:
    if not user_agent:
        return ""
    for token, family in table:
        if token in user_agent:
            return family
    return UNKNOWN


def parse_user_agent(user_agent: str) -> Tuple[str, str]:
    """
    Classify a user-agent string along two independent axes.

    Args:
        user_agent: Raw User-Agent header value

    Returns:
        Tuple of (os_family, browser_family). Both are "" for an empty
        string and "Unknown" when no token matches.
    """
    return _classify(user_agent, OS_TOKENS), _classify(user_agent, BROWSER_TOKENS)


def _ascending(counter: Counter) -> List[AnalyticsItem]:
    # Ties keep no particular order
    return [
        AnalyticsItem(name=name, count=count)
        for name, count in sorted(counter.items(), key=lambda item: item[1])
    ]


class AnalyticsService:
    """Aggregates view activities into per-shortcut analytics."""

    def __init__(self, activity_repository: ActivityRepository):
        self.activity_repository = activity_repository

    async def aggregate_views(self, db: AsyncSession, shortcut_id: int) -> ShortcutAnalyticsRead:
        """
        Group the views of a shortcut by referer, OS family and browser family.

        Each view contributes exactly one increment to each grouping. The
        empty referer is a bucket of its own.

        Args:
            db: Database session
            shortcut_id: The shortcut whose views are aggregated

        Returns:
            ShortcutAnalyticsRead: Three lists, each sorted ascending by count

        Raises:
            InternalError: If the activity log cannot be read
        """
        try:
            activities = await self.activity_repository.list_activities(
                db, type=ActivityType.SHORTCUT_VIEW, shortcut_id=shortcut_id
            )
        except RepositoryError as e:
            logger.error(f"Error reading view activities for shortcut {shortcut_id}: {e}")
            raise InternalError("Failed to read shortcut views") from e

        references: Counter = Counter()
        devices: Counter = Counter()
        browsers: Counter = Counter()
        for activity in activities:
            payload = ShortcutViewPayload.model_validate(activity.payload)
            os_family, browser_family = parse_user_agent(payload.user_agent)
            references[payload.referer] += 1
            devices[os_family] += 1
            browsers[browser_family] += 1

        return ShortcutAnalyticsRead(
            references=_ascending(references),
            devices=_ascending(devices),
            browsers=_ascending(browsers),
        )
