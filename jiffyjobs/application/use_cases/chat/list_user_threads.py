"""Use case for listing the chat threads a user takes part in."""

from sqlalchemy.orm import Session

from jiffyjobs.domain.entities import ChatThreadSummary
from jiffyjobs.infrastructure.repositories import ChatMessageRepository, ChatThreadRepository


def list_user_threads(session: Session, *, user_id: int) -> list[ChatThreadSummary]:
    """Return threads by most recent activity with their last message and unread count."""

    messages = ChatMessageRepository(session)
    return [
        ChatThreadSummary(
            thread=thread,
            last_message=messages.latest(thread.id),
            unread_count=messages.count_unread(thread.id, user_id),
        )
        for thread in ChatThreadRepository(session).list_for_user(user_id)
    ]
