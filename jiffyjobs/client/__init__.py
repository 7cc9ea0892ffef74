"""Async client for the chat API: REST calls, websocket events and local state."""

from .api import ChatApiClient, ChatApiError
from .polling import DEFAULT_POLL_INTERVAL, MIN_POLL_INTERVAL, PollingFallback
from .realtime import RealtimeConnection
from .session import ChatSession
from .state import MessageView, NotificationFeed, NotificationView, ThreadState

__all__ = [
    "ChatApiClient",
    "ChatApiError",
    "ChatSession",
    "DEFAULT_POLL_INTERVAL",
    "MIN_POLL_INTERVAL",
    "MessageView",
    "NotificationFeed",
    "NotificationView",
    "PollingFallback",
    "RealtimeConnection",
    "ThreadState",
]
