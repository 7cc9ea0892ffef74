"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from jiffyjobs.domain.entities import Notification, payload_from_metadata, payload_to_metadata
from jiffyjobs.infrastructure.models import NotificationModel
from jiffyjobs.utils import from_storage, to_storage, utc_now, utc_now_naive


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_for_user(
        self,
        user_id: int,
        *,
        page: int = 1,
        limit: int = 20,
        unread_only: bool = False,
    ) -> tuple[Sequence[Notification], int]:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if unread_only:
            query = query.filter(NotificationModel.is_read.is_(False))
        total = query.count()
        models = (
            query.order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return [self._to_entity(model) for model in models], total

    def count_unread(self, user_id: int) -> int:
        return (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .count()
        )

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            user_id=notification.user_id,
            type=notification.type.value,
            title=notification.title,
            message=notification.message,
            related_task_id=notification.related_task_id,
            related_thread_id=notification.related_thread_id,
            related_bid_id=notification.related_bid_id,
            metadata_json=payload_to_metadata(notification.payload),
            is_read=notification.is_read,
            created_at=to_storage(notification.created_at or utc_now()),
            read_at=to_storage(notification.read_at),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: int) -> Notification | None:
        """Flag one notification as read; an already read row keeps its ``read_at``."""

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        if not model.is_read:
            model.is_read = True
            model.read_at = utc_now_naive()
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_all_as_read(self, user_id: int) -> int:
        count = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .update(
                {
                    NotificationModel.is_read: True,
                    NotificationModel.read_at: utc_now_naive(),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return int(count or 0)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            title=model.title,
            message=model.message,
            payload=payload_from_metadata(model.type, model.metadata_json),
            is_read=bool(model.is_read),
            created_at=from_storage(model.created_at),
            read_at=from_storage(model.read_at),
        )


__all__ = ["NotificationRepository"]
