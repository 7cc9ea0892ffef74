"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.sql import expression

from jiffyjobs.infrastructure.database import Base
from jiffyjobs.utils import utc_now_naive


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    type = Column(String(40), nullable=False)
    title = Column(String(120), nullable=False)
    message = Column(Text, nullable=False)
    related_task_id = Column(Integer, nullable=True)
    related_thread_id = Column(Integer, nullable=True)
    related_bid_id = Column(Integer, nullable=True)
    metadata_json = Column("metadata", JSON, nullable=False, default=dict)
    is_read = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    created_at = Column(DateTime(), nullable=False, default=utc_now_naive)
    read_at = Column(DateTime(), nullable=True)


__all__ = ["NotificationModel"]
