"""Use cases for listing notifications and moving them from unread to read."""

from __future__ import annotations

from sqlalchemy.orm import Session

from jiffyjobs.domain.entities import Notification, Page
from jiffyjobs.domain.errors import NotFoundError, UnauthorizedError
from jiffyjobs.infrastructure.realtime import RealtimePublisher
from jiffyjobs.infrastructure.repositories import NotificationRepository


def list_notifications(
    session: Session,
    *,
    user_id: int,
    page: int = 1,
    limit: int = 20,
    unread_only: bool = False,
) -> Page[Notification]:
    """Return one page of ``user_id``'s notifications, newest first, plus the unread count."""

    repository = NotificationRepository(session)
    items, total = repository.list_for_user(
        user_id, page=page, limit=limit, unread_only=unread_only
    )
    return Page(
        items=list(items),
        page=page,
        limit=limit,
        total=total,
        unread_count=repository.count_unread(user_id),
    )


def mark_notification_read(
    session: Session,
    publisher: RealtimePublisher | None,
    *,
    user_id: int,
    notification_id: int,
) -> Notification:
    repository = NotificationRepository(session)
    notification = repository.get(notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.user_id != user_id:
        raise UnauthorizedError("This notification does not belong to you")
    if notification.is_read:
        return notification

    updated = repository.mark_as_read(notification_id)
    if updated is None:  # pragma: no cover - deleted between the two queries
        raise NotFoundError("Notification not found")
    if publisher is not None:
        publisher.notification_read(user_id, notification_id)
    return updated


def mark_all_notifications_read(
    session: Session,
    publisher: RealtimePublisher | None,
    *,
    user_id: int,
) -> int:
    count = NotificationRepository(session).mark_all_as_read(user_id)
    if count and publisher is not None:
        publisher.all_notifications_read(user_id, count)
    return count


__all__ = [
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
]
