"""Helpers that turn marketplace events into user notifications."""

from __future__ import annotations

from sqlalchemy.orm import Session

from jiffyjobs.domain.entities import (
    BidAcceptedPayload,
    ChatMessage,
    ChatThread,
    ContractCreatedPayload,
    HelperAssignedPayload,
    NewMessagePayload,
    Notification,
    NotificationType,
    ReviewRequestedPayload,
    TaskUpdatedPayload,
    User,
)
from jiffyjobs.infrastructure.realtime import RealtimePublisher

from .create_notification import create_notification
from .email_throttle import NotificationEmailThrottle


def notify_new_message(
    session: Session,
    publisher: RealtimePublisher | None,
    *,
    thread: ChatThread,
    message: ChatMessage,
    sender: User | None,
    email_throttle: NotificationEmailThrottle | None = None,
) -> Notification:
    """Tell the receiver of ``message`` that something arrived in ``thread``."""

    sender_name = sender.display_name if sender else "Someone"
    task_title = thread.task_title or "a task"
    return create_notification(
        session,
        publisher,
        user_id=message.receiver_id,
        notification_type=NotificationType.NEW_MESSAGE,
        title="New Message",
        message=f'{sender_name} sent you a message about "{task_title}"',
        payload=NewMessagePayload(
            thread_id=thread.id,
            task_id=thread.task_id,
            sender_id=message.sender_id,
            message_id=message.id,
        ),
        email_throttle=email_throttle,
    )


def notify_bid_accepted(
    session: Session,
    publisher: RealtimePublisher | None,
    *,
    helper_id: int,
    task_id: int,
    task_title: str,
    bid_id: int,
    email_throttle: NotificationEmailThrottle | None = None,
) -> Notification:
    return create_notification(
        session,
        publisher,
        user_id=helper_id,
        notification_type=NotificationType.BID_ACCEPTED,
        title="Bid Accepted",
        message=f'Your bid on "{task_title}" was accepted',
        payload=BidAcceptedPayload(task_id=task_id, bid_id=bid_id),
        email_throttle=email_throttle,
    )


def notify_helper_assigned(
    session: Session,
    publisher: RealtimePublisher | None,
    *,
    helper_id: int,
    task_id: int,
    task_title: str,
    email_throttle: NotificationEmailThrottle | None = None,
) -> Notification:
    return create_notification(
        session,
        publisher,
        user_id=helper_id,
        notification_type=NotificationType.HELPER_ASSIGNED,
        title="You've been assigned",
        message=f'You are now the helper for "{task_title}"',
        payload=HelperAssignedPayload(task_id=task_id, helper_id=helper_id),
        email_throttle=email_throttle,
    )


def notify_task_updated(
    session: Session,
    publisher: RealtimePublisher | None,
    *,
    user_id: int,
    task_id: int,
    task_title: str,
    status: str,
    email_throttle: NotificationEmailThrottle | None = None,
) -> Notification:
    return create_notification(
        session,
        publisher,
        user_id=user_id,
        notification_type=NotificationType.TASK_UPDATED,
        title="Task Updated",
        message=f'"{task_title}" is now {status.replace("_", " ").lower()}',
        payload=TaskUpdatedPayload(task_id=task_id, status=status),
        email_throttle=email_throttle,
    )


def notify_contract_created(
    session: Session,
    publisher: RealtimePublisher | None,
    *,
    user_id: int,
    task_id: int,
    task_title: str,
    bid_id: int,
    contract_id: int,
    email_throttle: NotificationEmailThrottle | None = None,
) -> Notification:
    return create_notification(
        session,
        publisher,
        user_id=user_id,
        notification_type=NotificationType.CONTRACT_CREATED,
        title="Contract Created",
        message=f'A contract was created for "{task_title}"',
        payload=ContractCreatedPayload(task_id=task_id, bid_id=bid_id, contract_id=contract_id),
        email_throttle=email_throttle,
    )


def notify_review_requested(
    session: Session,
    publisher: RealtimePublisher | None,
    *,
    user_id: int,
    task_id: int,
    task_title: str,
    reviewee_id: int,
    email_throttle: NotificationEmailThrottle | None = None,
) -> Notification:
    return create_notification(
        session,
        publisher,
        user_id=user_id,
        notification_type=NotificationType.REVIEW_REQUESTED,
        title="Leave a Review",
        message=f'How did "{task_title}" go? Leave a review',
        payload=ReviewRequestedPayload(task_id=task_id, reviewee_id=reviewee_id),
        email_throttle=email_throttle,
    )


__all__ = [
    "notify_bid_accepted",
    "notify_contract_created",
    "notify_helper_assigned",
    "notify_new_message",
    "notify_review_requested",
    "notify_task_updated",
]
