"""Pydantic models describing chat payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from jiffyjobs.utils import MAX_MESSAGE_LENGTH

from .common import PaginationRead


class ChatThreadCreate(BaseModel):
    """Payload used to open (or reopen) the chat with a helper."""

    task_id: int = Field(..., gt=0)
    helper_id: int = Field(..., gt=0)


class ChatMessageCreate(BaseModel):
    thread_id: int = Field(..., gt=0)
    body: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)


class MessageReportCreate(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


class ChatThreadRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    task_id: int
    poster_id: int
    helper_id: int
    task_title: str | None = None
    task_status: str | None = None
    created_at: datetime
    updated_at: datetime


class ChatMessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    thread_id: int
    sender_id: int
    receiver_id: int
    body: str
    read_at: datetime | None = None
    is_deleted: bool = False
    created_at: datetime


class ChatThreadSummaryRead(ChatThreadRead):
    last_message: ChatMessageRead | None = None
    unread_count: int = 0


class ChatThreadResponse(BaseModel):
    thread: ChatThreadRead
    created: bool = False


class ChatMessagePageRead(BaseModel):
    messages: list[ChatMessageRead]
    pagination: PaginationRead


class MarkReadResponse(BaseModel):
    count: int


class MessageReportRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    message_id: int
    reporter_id: int
    reason: str | None = None
    created_at: datetime


__all__ = [
    "ChatMessageCreate",
    "ChatMessagePageRead",
    "ChatMessageRead",
    "ChatThreadCreate",
    "ChatThreadRead",
    "ChatThreadResponse",
    "ChatThreadSummaryRead",
    "MarkReadResponse",
    "MessageReportCreate",
    "MessageReportRead",
]
