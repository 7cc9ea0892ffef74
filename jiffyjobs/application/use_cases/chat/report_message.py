"""Use case for reporting an abusive chat message."""

from sqlalchemy.orm import Session

from jiffyjobs.domain.entities import MessageReport
from jiffyjobs.domain.errors import NotFoundError, ValidationFailureError
from jiffyjobs.infrastructure.repositories import ChatMessageRepository

from .access import load_thread_for_participant


def report_message(
    session: Session,
    *,
    user_id: int,
    message_id: int,
    reason: str | None = None,
) -> MessageReport:
    repository = ChatMessageRepository(session)
    message = repository.get(message_id)
    if message is None:
        raise NotFoundError("Message not found")
    load_thread_for_participant(session, message.thread_id, user_id)

    if repository.has_report(message_id, user_id):
        raise ValidationFailureError("You have already reported this message")

    cleaned_reason = reason.strip() if reason else None
    return repository.create_report(
        MessageReport(
            id=None,
            message_id=message_id,
            reporter_id=user_id,
            reason=cleaned_reason or None,
        )
    )
