"""Use case for paging through a thread's messages."""

from sqlalchemy.orm import Session

from jiffyjobs.domain.entities import ChatMessage, Page
from jiffyjobs.domain.errors import ValidationFailureError
from jiffyjobs.infrastructure.repositories import ChatMessageRepository

from .access import load_thread_for_participant

MAX_PAGE_SIZE = 100


def list_thread_messages(
    session: Session,
    *,
    user_id: int,
    thread_id: int,
    page: int = 1,
    limit: int = 50,
) -> Page[ChatMessage]:
    """Return the ``page``-th newest window of messages in chronological order.

    Page 1 holds the most recent ``limit`` messages, which is what polling
    clients fetch.
    """

    if page < 1:
        raise ValidationFailureError("Page must be greater than 0")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationFailureError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")

    load_thread_for_participant(session, thread_id, user_id)
    items, total = ChatMessageRepository(session).list_page(thread_id, page=page, limit=limit)
    return Page(items=list(items), page=page, limit=limit, total=total)
