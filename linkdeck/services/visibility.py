"""Visibility policy.

Pure predicates deciding whether an actor may read or write a shortcut or
collection. Anonymous callers are represented by ``None``.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from linkdeck.models.common import Role, Visibility


@dataclass(frozen=True)
class Actor:
    """The authenticated user a request acts on behalf of."""

    id: int
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class Scoped(Protocol):
    creator_id: int
    visibility: Visibility


def can_read(actor: Optional[Actor], entity: Scoped) -> bool:
    """Anonymous callers see only public entities; members see everything
    that is not private, plus their own private entities."""
    if actor is None:
        return entity.visibility == Visibility.PUBLIC
    if entity.visibility != Visibility.PRIVATE:
        return True
    return actor.id == entity.creator_id


def can_write(actor: Optional[Actor], entity: Scoped) -> bool:
    """Only the owner or an administrator may modify an entity."""
    if actor is None:
        return False
    return actor.id == entity.creator_id or actor.is_admin
