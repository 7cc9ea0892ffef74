"""Client-side reconciliation of pushed and pulled chat data.

Messages and notifications can reach a client twice, once over the websocket
and once from a REST pull. Both paths feed the same ``merge`` methods, which
insert by id, so every item is observed exactly once and read flags only move
forward.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping


def parse_timestamp(value: Any) -> datetime | None:
    """Return an aware UTC datetime for ISO strings or datetimes, ``None`` otherwise."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass
class MessageView:
    id: int
    thread_id: int
    sender_id: int
    receiver_id: int
    body: str
    created_at: datetime
    read_at: datetime | None = None
    is_deleted: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "MessageView":
        return cls(
            id=int(payload["id"]),
            thread_id=int(payload["thread_id"]),
            sender_id=int(payload["sender_id"]),
            receiver_id=int(payload["receiver_id"]),
            body=payload.get("body", ""),
            created_at=parse_timestamp(payload["created_at"]),
            read_at=parse_timestamp(payload.get("read_at")),
            is_deleted=bool(payload.get("is_deleted", False)),
        )

    @property
    def sort_key(self) -> tuple[datetime, int]:
        return (self.created_at, self.id)


class ThreadState:
    """Messages of one thread as seen by ``viewer_id``.

    ``synced_through`` is the newest message id a REST pull has returned
    (``0`` for a thread that was empty, ``None`` before the first pull).
    Everything up to it is known to be contiguous; pushed messages may sit
    above it with a gap in between until the next pull.
    """

    def __init__(self, thread_id: int, viewer_id: int) -> None:
        self.thread_id = thread_id
        self.viewer_id = viewer_id
        self.synced_through: int | None = None
        self._messages: dict[int, MessageView] = {}

    def __len__(self) -> int:
        return len(self._messages)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._messages

    def merge(self, payloads: Iterable[Mapping[str, Any] | MessageView]) -> list[MessageView]:
        """Insert unseen messages and return them; known ids only gain read/deleted flags."""

        added: list[MessageView] = []
        for payload in payloads:
            incoming = (
                payload if isinstance(payload, MessageView) else MessageView.from_payload(payload)
            )
            if incoming.thread_id != self.thread_id:
                continue
            current = self._messages.get(incoming.id)
            if current is None:
                self._messages[incoming.id] = incoming
                added.append(incoming)
                continue
            if current.read_at is None and incoming.read_at is not None:
                current.read_at = incoming.read_at
            if incoming.is_deleted:
                current.is_deleted = True
        return sorted(added, key=lambda message: message.sort_key)

    def record_pull(self, newest_id: int | None) -> None:
        self.synced_through = max(self.synced_through or 0, newest_id or 0)

    def apply_messages_read(self, reader_id: int, read_at: datetime | None = None) -> int:
        """Mark every unread message addressed to ``reader_id`` as read; return how many changed."""

        stamp = read_at or datetime.now(timezone.utc)
        changed = 0
        for message in self._messages.values():
            if message.receiver_id == reader_id and message.read_at is None:
                message.read_at = stamp
                changed += 1
        return changed

    def apply_message_deleted(self, message_id: int) -> bool:
        message = self._messages.get(message_id)
        if message is None or message.is_deleted:
            return False
        message.is_deleted = True
        return True

    @property
    def messages(self) -> list[MessageView]:
        """Visible messages ordered by creation time, then id."""

        visible = [message for message in self._messages.values() if not message.is_deleted]
        return sorted(visible, key=lambda message: message.sort_key)

    @property
    def unread_count(self) -> int:
        return sum(
            1
            for message in self._messages.values()
            if message.receiver_id == self.viewer_id
            and message.read_at is None
            and not message.is_deleted
        )


@dataclass
class NotificationView:
    id: int
    type: str
    title: str
    message: str
    created_at: datetime
    is_read: bool = False
    read_at: datetime | None = None
    related_task_id: int | None = None
    related_thread_id: int | None = None
    related_bid_id: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "NotificationView":
        return cls(
            id=int(payload["id"]),
            type=str(payload["type"]),
            title=payload.get("title", ""),
            message=payload.get("message", ""),
            created_at=parse_timestamp(payload["created_at"]),
            is_read=bool(payload.get("is_read", False)),
            read_at=parse_timestamp(payload.get("read_at")),
            related_task_id=payload.get("related_task_id"),
            related_thread_id=payload.get("related_thread_id"),
            related_bid_id=payload.get("related_bid_id"),
            metadata=dict(payload.get("metadata") or {}),
        )


class NotificationFeed:
    """Notifications of the signed-in user, newest first."""

    def __init__(self) -> None:
        self._items: dict[int, NotificationView] = {}

    def __len__(self) -> int:
        return len(self._items)

    def merge(
        self, payloads: Iterable[Mapping[str, Any] | NotificationView]
    ) -> list[NotificationView]:
        added: list[NotificationView] = []
        for payload in payloads:
            incoming = (
                payload
                if isinstance(payload, NotificationView)
                else NotificationView.from_payload(payload)
            )
            current = self._items.get(incoming.id)
            if current is None:
                self._items[incoming.id] = incoming
                added.append(incoming)
            elif incoming.is_read and not current.is_read:
                current.is_read = True
                current.read_at = incoming.read_at or current.read_at
        return added

    def reconcile_unread(
        self,
        unread: Iterable[Mapping[str, Any] | NotificationView],
        *,
        up_to_id: int,
    ) -> list[NotificationView]:
        """Treat ``unread`` as the complete unread set for ids up to ``up_to_id``.

        Local items in that range that are missing from ``unread`` were read
        elsewhere. Newer items (pushed after the pull started) are left alone.
        """

        incoming = [
            item if isinstance(item, NotificationView) else NotificationView.from_payload(item)
            for item in unread
        ]
        added = self.merge(incoming)
        unread_ids = {item.id for item in incoming}
        for item in self._items.values():
            if item.id <= up_to_id and not item.is_read and item.id not in unread_ids:
                self.apply_read(item.id)
        return added

    def apply_read(self, notification_id: int, read_at: datetime | None = None) -> bool:
        item = self._items.get(notification_id)
        if item is None or item.is_read:
            return False
        item.is_read = True
        item.read_at = read_at or datetime.now(timezone.utc)
        return True

    def apply_all_read(self, read_at: datetime | None = None) -> int:
        stamp = read_at or datetime.now(timezone.utc)
        changed = 0
        for item in self._items.values():
            if not item.is_read:
                item.is_read = True
                item.read_at = stamp
                changed += 1
        return changed

    @property
    def items(self) -> list[NotificationView]:
        return sorted(
            self._items.values(), key=lambda item: (item.created_at, item.id), reverse=True
        )

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self._items.values() if not item.is_read)


__all__ = [
    "MessageView",
    "NotificationFeed",
    "NotificationView",
    "ThreadState",
    "parse_timestamp",
]
