"""ORM models used by the application infrastructure."""

from .user import UserModel
from .task import BidModel, TaskModel
from .chat import ChatMessageModel, ChatThreadModel, MessageReportModel
from .notification import NotificationModel

__all__ = [
    "UserModel",
    "TaskModel",
    "BidModel",
    "ChatThreadModel",
    "ChatMessageModel",
    "MessageReportModel",
    "NotificationModel",
]
