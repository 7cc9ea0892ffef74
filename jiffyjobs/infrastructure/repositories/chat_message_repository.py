"""Persistence helpers for chat message entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from jiffyjobs.domain.entities import ChatMessage, MessageReport
from jiffyjobs.infrastructure.models import ChatMessageModel, MessageReportModel
from jiffyjobs.utils import from_storage, to_storage, utc_now, utc_now_naive


class ChatMessageRepository:
    """Append, page through and flag :class:`ChatMessage` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, message_id: int) -> ChatMessage | None:
        model = self.session.get(ChatMessageModel, message_id)
        return self._to_entity(model) if model else None

    def create(self, message: ChatMessage) -> ChatMessage:
        model = ChatMessageModel(
            thread_id=message.thread_id,
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            body=message.body,
            is_deleted=False,
            created_at=to_storage(message.created_at or utc_now()),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_page(
        self, thread_id: int, *, page: int, limit: int
    ) -> tuple[Sequence[ChatMessage], int]:
        """Return the ``page``-th newest window of visible messages, oldest first."""

        base = self.session.query(ChatMessageModel).filter(
            ChatMessageModel.thread_id == thread_id,
            ChatMessageModel.is_deleted.is_(False),
        )
        total = base.count()
        models = (
            base.order_by(ChatMessageModel.created_at.desc(), ChatMessageModel.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        models.reverse()
        return [self._to_entity(model) for model in models], total

    def latest(self, thread_id: int) -> ChatMessage | None:
        model = (
            self.session.query(ChatMessageModel)
            .filter(
                ChatMessageModel.thread_id == thread_id,
                ChatMessageModel.is_deleted.is_(False),
            )
            .order_by(ChatMessageModel.created_at.desc(), ChatMessageModel.id.desc())
            .first()
        )
        return self._to_entity(model) if model else None

    def count_unread(self, thread_id: int, receiver_id: int) -> int:
        return (
            self.session.query(ChatMessageModel)
            .filter(
                ChatMessageModel.thread_id == thread_id,
                ChatMessageModel.receiver_id == receiver_id,
                ChatMessageModel.read_at.is_(None),
                ChatMessageModel.is_deleted.is_(False),
            )
            .count()
        )

    def mark_thread_read(self, thread_id: int, receiver_id: int) -> int:
        """Set ``read_at`` on every unread message addressed to ``receiver_id``.

        Messages that already carry a ``read_at`` are left untouched.
        """

        count = (
            self.session.query(ChatMessageModel)
            .filter(
                ChatMessageModel.thread_id == thread_id,
                ChatMessageModel.receiver_id == receiver_id,
                ChatMessageModel.read_at.is_(None),
                ChatMessageModel.is_deleted.is_(False),
            )
            .update(
                {ChatMessageModel.read_at: utc_now_naive()},
                synchronize_session=False,
            )
        )
        self.session.commit()
        return int(count or 0)

    def soft_delete(self, message_id: int) -> ChatMessage | None:
        model = self.session.get(ChatMessageModel, message_id)
        if model is None:
            return None
        if not model.is_deleted:
            model.is_deleted = True
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def has_report(self, message_id: int, reporter_id: int) -> bool:
        return (
            self.session.query(MessageReportModel.id)
            .filter(
                MessageReportModel.message_id == message_id,
                MessageReportModel.reporter_id == reporter_id,
            )
            .first()
            is not None
        )

    def create_report(self, report: MessageReport) -> MessageReport:
        model = MessageReportModel(
            message_id=report.message_id,
            reporter_id=report.reporter_id,
            reason=report.reason,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return MessageReport(
            id=model.id,
            message_id=model.message_id,
            reporter_id=model.reporter_id,
            reason=model.reason,
            created_at=from_storage(model.created_at),
        )

    @staticmethod
    def _to_entity(model: ChatMessageModel) -> ChatMessage:
        return ChatMessage(
            id=model.id,
            thread_id=model.thread_id,
            sender_id=model.sender_id,
            receiver_id=model.receiver_id,
            body=model.body,
            read_at=from_storage(model.read_at),
            is_deleted=bool(model.is_deleted),
            created_at=from_storage(model.created_at),
        )


__all__ = ["ChatMessageRepository"]
