"""Translate domain errors into HTTP responses."""

from fastapi import HTTPException, status

from jiffyjobs.domain.errors import (
    ChatError,
    NotFoundError,
    RateLimitExceededError,
    UnauthorizedError,
)


def to_http_exception(exc: ChatError) -> HTTPException:
    """Return the :class:`HTTPException` matching ``exc``."""

    if isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, UnauthorizedError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, RateLimitExceededError):
        code = status.HTTP_429_TOO_MANY_REQUESTS
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(exc))
