"""Use case for retrieving a single chat thread."""

from sqlalchemy.orm import Session

from jiffyjobs.domain.entities import ChatThread

from .access import load_thread_for_participant


def get_thread(session: Session, *, user_id: int, thread_id: int) -> ChatThread:
    return load_thread_for_participant(session, thread_id, user_id)
