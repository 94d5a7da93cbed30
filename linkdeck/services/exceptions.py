"""Exceptions for the shortcut manager service layer.

This module contains the exception hierarchy for the service layer,
providing domain-specific exceptions that abstract underlying implementation details.
"""


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class NotFoundError(ServiceError):
    """The requested entity does not exist."""
    pass


class ShortcutNotFoundError(NotFoundError):
    """No shortcut with the requested name or id exists."""
    pass


class CollectionNotFoundError(NotFoundError):
    """No collection with the requested name or id exists."""
    pass


class PermissionDeniedError(ServiceError):
    """The actor may not read or write the entity."""
    pass


class InvalidArgumentError(ServiceError):
    """The request is malformed, e.g. an empty update mask."""
    pass


class AlreadyExistsError(ServiceError):
    """The requested name is already taken."""
    pass


class InternalError(ServiceError):
    """A store or serialization failure."""
    pass


class ActivityRecordError(ServiceError):
    """An activity could not be recorded."""
    pass
