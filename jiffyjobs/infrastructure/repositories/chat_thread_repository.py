"""Persistence helpers for chat thread entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jiffyjobs.domain.entities import ChatThread
from jiffyjobs.infrastructure.models import ChatThreadModel
from jiffyjobs.utils import from_storage, utc_now_naive


class ChatThreadRepository:
    """Provide lookup and creation of :class:`ChatThread` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, thread_id: int) -> ChatThread | None:
        model = self.session.get(ChatThreadModel, thread_id)
        return self._to_entity(model) if model else None

    def get_by_task_and_helper(self, task_id: int, helper_id: int) -> ChatThread | None:
        model = (
            self.session.query(ChatThreadModel)
            .filter(
                ChatThreadModel.task_id == task_id,
                ChatThreadModel.helper_id == helper_id,
            )
            .first()
        )
        return self._to_entity(model) if model else None

    def list_for_user(self, user_id: int) -> Sequence[ChatThread]:
        query = (
            self.session.query(ChatThreadModel)
            .filter(
                or_(
                    ChatThreadModel.poster_id == user_id,
                    ChatThreadModel.helper_id == user_id,
                )
            )
            .order_by(ChatThreadModel.updated_at.desc(), ChatThreadModel.id.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    def create(self, *, task_id: int, poster_id: int, helper_id: int) -> tuple[ChatThread, bool]:
        """Insert the thread for ``(task_id, helper_id)`` unless it already exists.

        Returns the thread and whether it was created by this call.
        """

        now = utc_now_naive()
        model = ChatThreadModel(
            task_id=task_id,
            poster_id=poster_id,
            helper_id=helper_id,
            created_at=now,
            updated_at=now,
        )
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            existing = self.get_by_task_and_helper(task_id, helper_id)
            if existing is None:
                raise
            return existing, False
        self.session.refresh(model)
        return self._to_entity(model), True

    def touch(self, thread_id: int) -> None:
        """Bump ``updated_at`` so the thread sorts first in listings."""

        self.session.query(ChatThreadModel).filter(ChatThreadModel.id == thread_id).update(
            {ChatThreadModel.updated_at: utc_now_naive()},
            synchronize_session=False,
        )
        self.session.commit()

    @staticmethod
    def _to_entity(model: ChatThreadModel) -> ChatThread:
        task = model.task
        return ChatThread(
            id=model.id,
            task_id=model.task_id,
            poster_id=model.poster_id,
            helper_id=model.helper_id,
            created_at=from_storage(model.created_at),
            updated_at=from_storage(model.updated_at),
            task_title=task.title if task is not None else None,
            task_status=task.status if task is not None else None,
        )


__all__ = ["ChatThreadRepository"]
