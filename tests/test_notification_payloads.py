"""Tests for the typed notification payloads."""

from __future__ import annotations

import pytest

from jiffyjobs.domain.entities import (
    BidAcceptedPayload,
    NewMessagePayload,
    Notification,
    NotificationType,
    OtherPayload,
    TaskUpdatedPayload,
    payload_from_metadata,
    payload_to_metadata,
)


def test_metadata_decodes_into_the_registered_payload_class() -> None:
    payload = payload_from_metadata(
        "NEW_MESSAGE", {"thread_id": 4, "task_id": 2, "sender_id": 7, "message_id": 11}
    )

    assert payload == NewMessagePayload(thread_id=4, task_id=2, sender_id=7, message_id=11)
    assert payload_to_metadata(payload)["message_id"] == 11


@pytest.mark.parametrize(
    ("notification_type", "metadata"),
    [
        (NotificationType.NEW_MESSAGE, {"thread_id": 1, "task_id": 2}),
        (NotificationType.BID_ACCEPTED, {"task_id": 1, "bid_id": 2, "extra": True}),
        (NotificationType.TASK_UPDATED, {}),
    ],
)
def test_mismatched_metadata_is_rejected(notification_type, metadata) -> None:
    with pytest.raises(ValueError):
        payload_from_metadata(notification_type, metadata)


def test_other_notifications_accept_empty_metadata() -> None:
    assert payload_from_metadata(NotificationType.OTHER, None) == OtherPayload()


def test_notification_requires_payload_of_its_type() -> None:
    with pytest.raises(ValueError):
        Notification(
            id=None,
            user_id=1,
            type=NotificationType.NEW_MESSAGE,
            title="New Message",
            message="Hello",
            payload=BidAcceptedPayload(task_id=1, bid_id=2),
        )


def test_related_ids_come_from_the_payload() -> None:
    notification = Notification(
        id=1,
        user_id=3,
        type="TASK_UPDATED",
        title="Task Updated",
        message="The task is now in progress",
        payload=TaskUpdatedPayload(task_id=9, status="IN_PROGRESS"),
    )

    assert notification.type is NotificationType.TASK_UPDATED
    assert notification.related_task_id == 9
    assert notification.related_thread_id is None
    assert notification.related_bid_id is None
