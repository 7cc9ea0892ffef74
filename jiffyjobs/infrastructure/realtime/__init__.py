"""Realtime delivery of chat messages and notifications over websockets."""

from .gateway import RealtimeGateway
from .publisher import RealtimePublisher
from .events import serialize_message, serialize_notification, serialize_thread

__all__ = [
    "RealtimeGateway",
    "RealtimePublisher",
    "serialize_message",
    "serialize_notification",
    "serialize_thread",
]
