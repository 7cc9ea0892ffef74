"""Domain entity representing a user notification.

Every notification type carries a payload with a fixed shape. The payload is
stored as JSON metadata and decoded back into the dataclass registered for the
notification's type; a stored payload whose keys do not match is rejected.
"""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Any, Mapping, Union


class NotificationType(str, enum.Enum):
    NEW_MESSAGE = "NEW_MESSAGE"
    BID_ACCEPTED = "BID_ACCEPTED"
    HELPER_ASSIGNED = "HELPER_ASSIGNED"
    TASK_UPDATED = "TASK_UPDATED"
    CONTRACT_CREATED = "CONTRACT_CREATED"
    REVIEW_REQUESTED = "REVIEW_REQUESTED"
    OTHER = "OTHER"


@dataclass(frozen=True)
class NewMessagePayload:
    thread_id: int
    task_id: int
    sender_id: int
    message_id: int


@dataclass(frozen=True)
class BidAcceptedPayload:
    task_id: int
    bid_id: int


@dataclass(frozen=True)
class HelperAssignedPayload:
    task_id: int
    helper_id: int


@dataclass(frozen=True)
class TaskUpdatedPayload:
    task_id: int
    status: str


@dataclass(frozen=True)
class ContractCreatedPayload:
    task_id: int
    bid_id: int
    contract_id: int


@dataclass(frozen=True)
class ReviewRequestedPayload:
    task_id: int
    reviewee_id: int


@dataclass(frozen=True)
class OtherPayload:
    data: dict[str, Any] = field(default_factory=dict)


NotificationPayload = Union[
    NewMessagePayload,
    BidAcceptedPayload,
    HelperAssignedPayload,
    TaskUpdatedPayload,
    ContractCreatedPayload,
    ReviewRequestedPayload,
    OtherPayload,
]

PAYLOAD_TYPES: dict[NotificationType, type] = {
    NotificationType.NEW_MESSAGE: NewMessagePayload,
    NotificationType.BID_ACCEPTED: BidAcceptedPayload,
    NotificationType.HELPER_ASSIGNED: HelperAssignedPayload,
    NotificationType.TASK_UPDATED: TaskUpdatedPayload,
    NotificationType.CONTRACT_CREATED: ContractCreatedPayload,
    NotificationType.REVIEW_REQUESTED: ReviewRequestedPayload,
    NotificationType.OTHER: OtherPayload,
}


def payload_to_metadata(payload: NotificationPayload) -> dict[str, Any]:
    """Return the JSON-serializable metadata stored for ``payload``."""

    return asdict(payload)


def payload_from_metadata(
    notification_type: NotificationType | str, metadata: Mapping[str, Any] | None
) -> NotificationPayload:
    """Decode stored ``metadata`` into the payload class for ``notification_type``."""

    kind = NotificationType(notification_type)
    payload_cls = PAYLOAD_TYPES[kind]
    data = dict(metadata or {})
    expected = {item.name for item in fields(payload_cls)}
    if set(data) != expected and not (kind is NotificationType.OTHER and not data):
        missing = sorted(expected - set(data))
        unexpected = sorted(set(data) - expected)
        raise ValueError(
            f"Invalid {kind.value} payload: missing={missing} unexpected={unexpected}"
        )
    return payload_cls(**data)


def ensure_payload_matches(
    notification_type: NotificationType, payload: NotificationPayload
) -> None:
    """Raise ``ValueError`` when ``payload`` is not the shape of ``notification_type``."""

    expected = PAYLOAD_TYPES[notification_type]
    if not isinstance(payload, expected):
        raise ValueError(
            f"{notification_type.value} notifications require {expected.__name__}, "
            f"got {type(payload).__name__}"
        )


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    user_id: int
    type: NotificationType
    title: str
    message: str
    payload: NotificationPayload
    is_read: bool = False
    created_at: datetime | None = None
    read_at: datetime | None = None

    def __post_init__(self) -> None:
        self.type = NotificationType(self.type)
        ensure_payload_matches(self.type, self.payload)

    @property
    def related_task_id(self) -> int | None:
        return getattr(self.payload, "task_id", None)

    @property
    def related_thread_id(self) -> int | None:
        return getattr(self.payload, "thread_id", None)

    @property
    def related_bid_id(self) -> int | None:
        return getattr(self.payload, "bid_id", None)


__all__ = [
    "BidAcceptedPayload",
    "ContractCreatedPayload",
    "HelperAssignedPayload",
    "NewMessagePayload",
    "Notification",
    "NotificationPayload",
    "NotificationType",
    "OtherPayload",
    "PAYLOAD_TYPES",
    "ReviewRequestedPayload",
    "TaskUpdatedPayload",
    "ensure_payload_matches",
    "payload_from_metadata",
    "payload_to_metadata",
]
