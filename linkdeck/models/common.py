"""Enumerations shared by the shortcut manager data models."""

from datetime import datetime, timezone
from enum import Enum


class Visibility(str, Enum):
    """Access scope of a shortcut or collection.

    The domain is ordered: PRIVATE < WORKSPACE < PUBLIC.
    """

    PRIVATE = "PRIVATE"
    WORKSPACE = "WORKSPACE"
    PUBLIC = "PUBLIC"

    @property
    def rank(self) -> int:
        return _VISIBILITY_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, Visibility):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Visibility):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Visibility):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Visibility):
            return NotImplemented
        return self.rank >= other.rank


_VISIBILITY_RANK = {
    Visibility.PRIVATE: 0,
    Visibility.WORKSPACE: 1,
    Visibility.PUBLIC: 2,
}


class RowStatus(str, Enum):
    """Logical row status; archived rows keep their history but free their name."""

    NORMAL = "NORMAL"
    ARCHIVED = "ARCHIVED"


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
