"""Use case for soft-deleting a chat message."""

from sqlalchemy.orm import Session

from jiffyjobs.domain.entities import ChatMessage
from jiffyjobs.domain.errors import NotFoundError, UnauthorizedError
from jiffyjobs.infrastructure.realtime import RealtimePublisher
from jiffyjobs.infrastructure.repositories import ChatMessageRepository


def delete_message(
    session: Session,
    publisher: RealtimePublisher | None,
    *,
    user_id: int,
    message_id: int,
) -> ChatMessage:
    """Hide ``message_id`` from listings; only its sender may do so."""

    repository = ChatMessageRepository(session)
    message = repository.get(message_id)
    if message is None or message.is_deleted:
        raise NotFoundError("Message not found")
    if message.sender_id != user_id:
        raise UnauthorizedError("Only the sender can delete this message")

    deleted = repository.soft_delete(message_id)
    if deleted is None:  # pragma: no cover - removed between the two queries
        raise NotFoundError("Message not found")
    if publisher is not None:
        publisher.message_deleted(deleted)
    return deleted
