"""Repository implementations for infrastructure layer."""

from .user_repository import UserRepository
from .task_repository import TaskRepository
from .chat_thread_repository import ChatThreadRepository
from .chat_message_repository import ChatMessageRepository
from .notification_repository import NotificationRepository

__all__ = [
    "UserRepository",
    "TaskRepository",
    "ChatThreadRepository",
    "ChatMessageRepository",
    "NotificationRepository",
]
