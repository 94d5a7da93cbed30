"""User repository."""

from linkdeck.models.user import User, UserCreate
from linkdeck.repositories.base import BaseRepository


class UserRepository(BaseRepository[User, UserCreate, UserCreate]):
    """
    Repository for User lookups.

    Users are provisioned outside this service; the repository only reads
    them by id to resolve the acting user of a request.
    """

    def __init__(self):
        super().__init__(User)
