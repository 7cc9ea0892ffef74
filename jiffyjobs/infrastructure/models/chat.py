"""SQLAlchemy models for chat threads, messages and message reports."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import expression
from sqlalchemy.orm import relationship

from jiffyjobs.infrastructure.database import Base
from jiffyjobs.utils import utc_now_naive


class ChatThreadModel(Base):
    """One conversation per task and helper."""

    __tablename__ = "chat_thread"
    __table_args__ = (UniqueConstraint("task_id", "helper_id", name="uq_chat_thread_task_helper"),)

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("task.id"), nullable=False, index=True)
    poster_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    helper_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    created_at = Column(DateTime(), nullable=False, default=utc_now_naive)
    updated_at = Column(DateTime(), nullable=False, default=utc_now_naive)

    task = relationship("TaskModel", lazy="joined")
    messages = relationship(
        "ChatMessageModel",
        back_populates="thread",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ChatMessageModel(Base):
    """A single message exchanged inside a thread."""

    __tablename__ = "chat_message"
    __table_args__ = (
        Index("ix_chat_message_thread_created", "thread_id", "created_at"),
        Index("ix_chat_message_receiver_unread", "receiver_id", "read_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    thread_id = Column(
        Integer, ForeignKey("chat_thread.id", ondelete="CASCADE"), nullable=False
    )
    sender_id = Column(Integer, ForeignKey("user.id"), nullable=False)
    receiver_id = Column(Integer, ForeignKey("user.id"), nullable=False)
    body = Column(Text, nullable=False)
    read_at = Column(DateTime(), nullable=True)
    is_deleted = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    created_at = Column(DateTime(), nullable=False, default=utc_now_naive)

    thread = relationship("ChatThreadModel", back_populates="messages")


class MessageReportModel(Base):
    """A participant's moderation report about a message."""

    __tablename__ = "message_report"
    __table_args__ = (
        UniqueConstraint("message_id", "reporter_id", name="uq_message_report_reporter"),
    )

    id = Column(Integer, primary_key=True, index=True)
    message_id = Column(
        Integer, ForeignKey("chat_message.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reporter_id = Column(Integer, ForeignKey("user.id"), nullable=False)
    reason = Column(String(500), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=utc_now_naive)


__all__ = ["ChatMessageModel", "ChatThreadModel", "MessageReportModel"]
