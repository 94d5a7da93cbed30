"""Translation of service exceptions into HTTP errors."""

from typing import Dict, Type

from fastapi import HTTPException, status

from linkdeck.services.exceptions import (
    AlreadyExistsError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
)

STATUS_BY_ERROR: Dict[Type[ServiceError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    AlreadyExistsError: status.HTTP_409_CONFLICT,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: ServiceError) -> int:
    """HTTP status of a service error; unmapped errors are internal."""
    for error_type, status_code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(exc: ServiceError) -> HTTPException:
    return HTTPException(status_code=status_for(exc), detail=str(exc))
