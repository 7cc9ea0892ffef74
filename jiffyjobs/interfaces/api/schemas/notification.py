"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from jiffyjobs.domain.entities import Notification, NotificationType, payload_to_metadata

from .common import PaginationRead


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: int
    type: NotificationType
    title: str
    message: str
    is_read: bool
    related_task_id: int | None = None
    related_thread_id: int | None = None
    related_bid_id: int | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    read_at: datetime | None = None

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        return cls(
            id=notification.id or 0,
            user_id=notification.user_id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            is_read=notification.is_read,
            related_task_id=notification.related_task_id,
            related_thread_id=notification.related_thread_id,
            related_bid_id=notification.related_bid_id,
            metadata=payload_to_metadata(notification.payload),
            created_at=notification.created_at,
            read_at=notification.read_at,
        )


class NotificationPageRead(BaseModel):
    notifications: list[NotificationRead]
    pagination: PaginationRead
    unread_count: int


class MarkAllReadResponse(BaseModel):
    count: int


__all__ = ["MarkAllReadResponse", "NotificationPageRead", "NotificationRead"]
