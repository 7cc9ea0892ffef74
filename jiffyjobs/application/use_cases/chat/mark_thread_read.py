"""Use case for marking every message addressed to a user in a thread as read."""

from sqlalchemy.orm import Session

from jiffyjobs.infrastructure.realtime import RealtimePublisher
from jiffyjobs.infrastructure.repositories import ChatMessageRepository

from .access import load_thread_for_participant


def mark_thread_read(
    session: Session,
    publisher: RealtimePublisher | None,
    *,
    user_id: int,
    thread_id: int,
) -> int:
    """Stamp ``read_at`` on unread messages received by ``user_id`` and return how many."""

    load_thread_for_participant(session, thread_id, user_id)
    count = ChatMessageRepository(session).mark_thread_read(thread_id, user_id)
    if publisher is not None:
        publisher.messages_read(thread_id, user_id, count)
    return count
