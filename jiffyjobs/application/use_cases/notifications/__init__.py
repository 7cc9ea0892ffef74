"""Public helpers for emitting and reading user notifications."""

from .create_notification import create_notification
from .email_throttle import NotificationEmailThrottle
from .events import (
    notify_bid_accepted,
    notify_contract_created,
    notify_helper_assigned,
    notify_new_message,
    notify_review_requested,
    notify_task_updated,
)
from .read_state import (
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)

__all__ = [
    "NotificationEmailThrottle",
    "create_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "notify_bid_accepted",
    "notify_contract_created",
    "notify_helper_assigned",
    "notify_new_message",
    "notify_review_requested",
    "notify_task_updated",
]
