"""Use case for sending a chat message."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jiffyjobs.application.use_cases.notifications import (
    NotificationEmailThrottle,
    notify_new_message,
)
from jiffyjobs.domain.entities import ChatMessage
from jiffyjobs.domain.errors import RateLimitExceededError, ValidationFailureError
from jiffyjobs.infrastructure.rate_limit import MessageRateLimiter
from jiffyjobs.infrastructure.realtime import RealtimePublisher
from jiffyjobs.infrastructure.repositories import (
    ChatMessageRepository,
    ChatThreadRepository,
    UserRepository,
)
from jiffyjobs.utils import is_valid_message, sanitize_message, utc_now

from .access import load_thread_for_participant

logger = logging.getLogger(__name__)


def send_message(
    session: Session,
    publisher: RealtimePublisher | None,
    *,
    user_id: int,
    thread_id: int,
    body: str,
    rate_limiter: MessageRateLimiter | None = None,
    email_throttle: NotificationEmailThrottle | None = None,
) -> ChatMessage:
    """Persist ``body`` from ``user_id`` to the other participant of ``thread_id``.

    The stored message is pushed to the thread room and the receiver gets a
    ``NEW_MESSAGE`` notification. Neither step can fail the send once the
    message is committed.
    """

    if not is_valid_message(body):
        raise ValidationFailureError("Message body must be between 1 and 5000 characters")
    sanitized = sanitize_message(body)
    if not sanitized:
        raise ValidationFailureError("Message body cannot be empty")

    thread = load_thread_for_participant(session, thread_id, user_id)

    if rate_limiter is not None and not rate_limiter.hit(user_id, thread_id):
        raise RateLimitExceededError(
            f"Rate limit exceeded: Maximum {rate_limiter.limit} messages per minute allowed. "
            "Please wait a moment before sending another message."
        )

    message = ChatMessageRepository(session).create(
        ChatMessage(
            id=None,
            thread_id=thread.id,
            sender_id=user_id,
            receiver_id=thread.counterpart_of(user_id),
            body=sanitized,
            created_at=utc_now(),
        )
    )
    ChatThreadRepository(session).touch(thread.id)

    if publisher is not None:
        publisher.message_created(message)

    try:
        notify_new_message(
            session,
            publisher,
            thread=thread,
            message=message,
            sender=UserRepository(session).get(user_id),
            email_throttle=email_throttle,
        )
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Could not create new-message notification for message %s", message.id)

    return message
