from .chat import (
    ChatMessageCreate,
    ChatMessagePageRead,
    ChatMessageRead,
    ChatThreadCreate,
    ChatThreadRead,
    ChatThreadResponse,
    ChatThreadSummaryRead,
    MarkReadResponse,
    MessageReportCreate,
    MessageReportRead,
)
from .common import PaginationRead
from .notification import MarkAllReadResponse, NotificationPageRead, NotificationRead

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
    "PaginationRead",
    "MarkAllReadResponse",
    "NotificationPageRead",
    "NotificationRead",
]
