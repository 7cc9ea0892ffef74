"""Wire envelopes exchanged over the realtime websocket."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Final

from jiffyjobs.domain.entities import (
    ChatMessage,
    ChatThread,
    Notification,
    payload_to_metadata,
)

# client -> server
JOIN_THREAD: Final[str] = "join-thread"
LEAVE_THREAD: Final[str] = "leave-thread"
PING: Final[str] = "ping"

# server -> client
CONNECTED: Final[str] = "connected"
THREAD_JOINED: Final[str] = "thread-joined"
THREAD_LEFT: Final[str] = "thread-left"
NEW_MESSAGE: Final[str] = "new-message"
MESSAGES_READ: Final[str] = "messages-read"
MESSAGE_DELETED: Final[str] = "message-deleted"
THREAD_CREATED: Final[str] = "thread-created"
NEW_NOTIFICATION: Final[str] = "new-notification"
NOTIFICATION_READ: Final[str] = "notification-read"
ALL_NOTIFICATIONS_READ: Final[str] = "notifications-read-all"
ERROR: Final[str] = "error"
PONG: Final[str] = "pong"


def envelope(event_type: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
    """Wrap ``data`` in the ``{"type", "data"}`` envelope used on the socket."""

    return {"type": event_type, "data": data or {}}


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def serialize_message(message: ChatMessage) -> dict[str, Any]:
    """Return the JSON representation of ``message`` shared by REST and websocket."""

    return {
        "id": message.id,
        "thread_id": message.thread_id,
        "sender_id": message.sender_id,
        "receiver_id": message.receiver_id,
        "body": message.body,
        "read_at": _iso(message.read_at),
        "is_deleted": message.is_deleted,
        "created_at": _iso(message.created_at),
    }


def serialize_thread(thread: ChatThread) -> dict[str, Any]:
    return {
        "id": thread.id,
        "task_id": thread.task_id,
        "poster_id": thread.poster_id,
        "helper_id": thread.helper_id,
        "task_title": thread.task_title,
        "task_status": thread.task_status,
        "created_at": _iso(thread.created_at),
        "updated_at": _iso(thread.updated_at),
    }


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "type": notification.type.value,
        "title": notification.title,
        "message": notification.message,
        "is_read": notification.is_read,
        "related_task_id": notification.related_task_id,
        "related_thread_id": notification.related_thread_id,
        "related_bid_id": notification.related_bid_id,
        "metadata": payload_to_metadata(notification.payload),
        "created_at": _iso(notification.created_at),
        "read_at": _iso(notification.read_at),
    }


def new_message_event(thread_id: int, message: ChatMessage) -> dict[str, Any]:
    return envelope(NEW_MESSAGE, {"thread_id": thread_id, "message": serialize_message(message)})


def messages_read_event(thread_id: int, reader_id: int, count: int) -> dict[str, Any]:
    return envelope(
        MESSAGES_READ, {"thread_id": thread_id, "user_id": reader_id, "count": count}
    )


def message_deleted_event(thread_id: int, message_id: int) -> dict[str, Any]:
    return envelope(MESSAGE_DELETED, {"thread_id": thread_id, "message_id": message_id})


def thread_created_event(thread: ChatThread) -> dict[str, Any]:
    return envelope(THREAD_CREATED, {"thread": serialize_thread(thread)})


def new_notification_event(notification: Notification) -> dict[str, Any]:
    return envelope(NEW_NOTIFICATION, {"notification": serialize_notification(notification)})


def notification_read_event(notification_id: int) -> dict[str, Any]:
    return envelope(NOTIFICATION_READ, {"notification_id": notification_id})


def all_notifications_read_event(count: int) -> dict[str, Any]:
    return envelope(ALL_NOTIFICATIONS_READ, {"count": count})


def error_event(code: str, detail: str) -> dict[str, Any]:
    return envelope(ERROR, {"code": code, "detail": detail})


__all__ = [
    "ALL_NOTIFICATIONS_READ",
    "CONNECTED",
    "ERROR",
    "JOIN_THREAD",
    "LEAVE_THREAD",
    "MESSAGE_DELETED",
    "MESSAGES_READ",
    "NEW_MESSAGE",
    "NEW_NOTIFICATION",
    "NOTIFICATION_READ",
    "PING",
    "PONG",
    "THREAD_CREATED",
    "THREAD_JOINED",
    "THREAD_LEFT",
    "all_notifications_read_event",
    "envelope",
    "error_event",
    "message_deleted_event",
    "messages_read_event",
    "new_message_event",
    "new_notification_event",
    "notification_read_event",
    "serialize_message",
    "serialize_notification",
    "serialize_thread",
    "thread_created_event",
]
