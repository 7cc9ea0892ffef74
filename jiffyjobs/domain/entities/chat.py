"""Domain entities for chat threads and their messages."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ChatThread:
    """Conversation between the poster and one helper about a single task."""

    id: int | None
    task_id: int
    poster_id: int
    helper_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    task_title: str | None = None
    task_status: str | None = None

    def has_participant(self, user_id: int | None) -> bool:
        """Return ``True`` when ``user_id`` is the poster or the helper."""

        return user_id is not None and user_id in (self.poster_id, self.helper_id)

    def counterpart_of(self, user_id: int) -> int:
        """Return the identifier of the other participant."""

        if user_id == self.poster_id:
            return self.helper_id
        if user_id == self.helper_id:
            return self.poster_id
        raise ValueError(f"User {user_id} is not part of thread {self.id}")


@dataclass
class ChatMessage:
    """A message sent from one thread participant to the other.

    ``read_at`` moves from ``None`` to a timestamp exactly once. ``is_deleted``
    is an independent soft-delete flag.
    """

    id: int | None
    thread_id: int
    sender_id: int
    receiver_id: int
    body: str
    read_at: datetime | None = None
    is_deleted: bool = False
    created_at: datetime | None = None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None


@dataclass
class ChatThreadSummary:
    """Thread listing row with the latest message and the viewer's unread count."""

    thread: ChatThread
    last_message: ChatMessage | None
    unread_count: int


@dataclass
class MessageReport:
    """A participant's report flagging a message for moderation."""

    id: int | None
    message_id: int
    reporter_id: int
    reason: str | None = None
    created_at: datetime | None = None


__all__ = ["ChatMessage", "ChatThread", "ChatThreadSummary", "MessageReport"]
