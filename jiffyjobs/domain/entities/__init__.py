"""Domain entities exposed by the application."""

from .chat import ChatMessage, ChatThread, ChatThreadSummary, MessageReport
from .notification import (
    BidAcceptedPayload,
    ContractCreatedPayload,
    HelperAssignedPayload,
    NewMessagePayload,
    Notification,
    NotificationPayload,
    NotificationType,
    OtherPayload,
    ReviewRequestedPayload,
    TaskUpdatedPayload,
    payload_from_metadata,
    payload_to_metadata,
)
from .page import Page
from .task import (
    BID_STATUS_ACCEPTED,
    BID_STATUS_PENDING,
    BID_STATUS_REJECTED,
    BID_STATUS_WITHDRAWN,
    Bid,
    Task,
)
from .user import User

__all__ = [
    "ChatMessage",
    "ChatThread",
    "ChatThreadSummary",
    "MessageReport",
    "BidAcceptedPayload",
    "ContractCreatedPayload",
    "HelperAssignedPayload",
    "NewMessagePayload",
    "Notification",
    "NotificationPayload",
    "NotificationType",
    "OtherPayload",
    "ReviewRequestedPayload",
    "TaskUpdatedPayload",
    "payload_from_metadata",
    "payload_to_metadata",
    "Page",
    "BID_STATUS_ACCEPTED",
    "BID_STATUS_PENDING",
    "BID_STATUS_REJECTED",
    "BID_STATUS_WITHDRAWN",
    "Bid",
    "Task",
    "User",
]
