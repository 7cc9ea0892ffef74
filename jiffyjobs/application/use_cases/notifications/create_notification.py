"""Persist a notification, email it when asked and push it to live clients."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from jiffyjobs.config import get_settings
from jiffyjobs.domain.entities import Notification, NotificationPayload, NotificationType
from jiffyjobs.infrastructure.realtime import RealtimePublisher
from jiffyjobs.infrastructure.repositories import NotificationRepository, UserRepository
from jiffyjobs.utils import utc_now

from .email_throttle import NotificationEmailThrottle

logger = logging.getLogger(__name__)


def _notification_link(notification: Notification) -> str:
    base_url = get_settings().frontend_url.rstrip("/")
    if notification.related_task_id is not None:
        return f"{base_url}/tasks/{notification.related_task_id}"
    return f"{base_url}/notifications"


def create_notification(
    session: Session,
    publisher: RealtimePublisher | None,
    *,
    user_id: int,
    notification_type: NotificationType,
    title: str,
    message: str,
    payload: NotificationPayload,
    email_throttle: NotificationEmailThrottle | None = None,
) -> Notification:
    """Store the notification for ``user_id`` and fan it out.

    ``payload`` must match the shape registered for ``notification_type``.
    """

    notification = Notification(
        id=None,
        user_id=user_id,
        type=notification_type,
        title=title,
        message=message,
        payload=payload,
        is_read=False,
        created_at=utc_now(),
    )
    saved = NotificationRepository(session).create(notification)

    if email_throttle is not None:
        user = UserRepository(session).get(user_id)
        if user is None:
            logger.warning("Cannot email notification %s: user %s not found", saved.id, user_id)
        else:
            email_throttle.submit(user, saved.title, saved.message, _notification_link(saved))

    if publisher is not None:
        publisher.notification_created(saved)
    return saved


__all__ = ["create_notification"]
