"""Errors raised by chat and notification use cases."""

from __future__ import annotations


class ChatError(ValueError):
    """Base class for domain errors surfaced to API clients."""

    code = "chat_error"


class NotFoundError(ChatError):
    """The requested thread, message or notification does not exist."""

    code = "not_found"


class UnauthorizedError(ChatError):
    """The acting user is not allowed to touch the requested resource."""

    code = "unauthorized"


class ValidationFailureError(ChatError):
    """The request payload is empty, oversized or otherwise malformed."""

    code = "validation_failure"


class RateLimitExceededError(ChatError):
    """The user sent too many messages to one thread in a short window."""

    code = "rate_limited"


class TransientDeliveryFailure(Exception):
    """A realtime write to a connection failed; the connection is considered dead."""


__all__ = [
    "ChatError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationFailureError",
    "RateLimitExceededError",
    "TransientDeliveryFailure",
]
