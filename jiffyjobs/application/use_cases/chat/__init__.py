"""Use cases for chat threads and messages."""

from .delete_message import delete_message
from .get_or_create_thread import get_or_create_thread
from .get_thread import get_thread
from .list_thread_messages import MAX_PAGE_SIZE, list_thread_messages
from .list_user_threads import list_user_threads
from .mark_thread_read import mark_thread_read
from .report_message import report_message
from .send_message import send_message

__all__ = [
    "MAX_PAGE_SIZE",
    "delete_message",
    "get_or_create_thread",
    "get_thread",
    "list_thread_messages",
    "list_user_threads",
    "mark_thread_read",
    "report_message",
    "send_message",
]
