"""Shared participant checks for chat use cases."""

from sqlalchemy.orm import Session

from jiffyjobs.domain.entities import ChatThread
from jiffyjobs.domain.errors import NotFoundError, UnauthorizedError
from jiffyjobs.infrastructure.repositories import ChatThreadRepository


def load_thread_for_participant(session: Session, thread_id: int, user_id: int) -> ChatThread:
    """Return the thread or raise when it is missing or ``user_id`` is not part of it."""

    thread = ChatThreadRepository(session).get(thread_id)
    if thread is None:
        raise NotFoundError("Chat thread not found")
    if not thread.has_participant(user_id):
        raise UnauthorizedError("You are not part of this chat thread")
    return thread
