"""Tests for room membership and fan-out in the realtime gateway."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

import pytest

from jiffyjobs.domain.entities import (
    ChatMessage,
    ChatThread,
    NewMessagePayload,
    Notification,
    NotificationType,
)
from jiffyjobs.domain.errors import UnauthorizedError
from jiffyjobs.infrastructure.realtime import RealtimeGateway

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeConnection:
    """Stand-in for a websocket that records what it was sent."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[dict] = []

    async def send_json(self, data: dict) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)

    def types(self) -> list[str]:
        return [event["type"] for event in self.sent]


def _thread(thread_id: int = 1, poster_id: int = 1, helper_id: int = 2) -> ChatThread:
    return ChatThread(
        id=thread_id, task_id=5, poster_id=poster_id, helper_id=helper_id, created_at=NOW, updated_at=NOW
    )


def _message(thread_id: int = 1, message_id: int = 10) -> ChatMessage:
    return ChatMessage(
        id=message_id, thread_id=thread_id, sender_id=1, receiver_id=2, body="hi", created_at=NOW
    )


def _notification(user_id: int) -> Notification:
    return Notification(
        id=3,
        user_id=user_id,
        type=NotificationType.NEW_MESSAGE,
        title="New Message",
        message="Paula sent you a message",
        payload=NewMessagePayload(thread_id=1, task_id=5, sender_id=1, message_id=10),
        created_at=NOW,
    )


def test_register_is_idempotent_and_disconnect_prunes_rooms() -> None:
    gateway = RealtimeGateway()
    connection = FakeConnection()

    gateway.register(1, connection)
    gateway.register(1, connection)
    gateway.join_thread_room(connection, _thread())
    assert gateway.connection_count == 1
    assert gateway.room_size(1) == 1

    gateway.disconnect(connection)

    assert gateway.connection_count == 0
    assert gateway.room_size(1) == 0
    assert gateway.rooms_of(connection) == frozenset()
    assert not gateway.is_user_connected(1)


def test_connection_cannot_switch_user() -> None:
    gateway = RealtimeGateway()
    connection = FakeConnection()
    gateway.register(1, connection)

    with pytest.raises(ValueError):
        gateway.register(2, connection)


def test_only_participants_may_join_a_room() -> None:
    gateway = RealtimeGateway()
    outsider = FakeConnection()
    gateway.register(3, outsider)

    with pytest.raises(UnauthorizedError):
        gateway.join_thread_room(outsider, _thread())
    with pytest.raises(UnauthorizedError):
        gateway.join_thread_room(FakeConnection(), _thread())
    assert gateway.room_size(1) == 0


def test_leave_unknown_room_is_a_no_op() -> None:
    gateway = RealtimeGateway()
    connection = FakeConnection()
    gateway.register(1, connection)

    gateway.leave_thread_room(connection, 99)
    gateway.join_thread_room(connection, _thread())
    gateway.leave_thread_room(connection, 1)

    assert gateway.room_size(1) == 0


def test_messages_reach_room_members_only() -> None:
    gateway = RealtimeGateway()
    poster, helper, elsewhere = FakeConnection(), FakeConnection(), FakeConnection()
    gateway.register(1, poster)
    gateway.register(2, helper)
    gateway.register(2, elsewhere)
    gateway.join_thread_room(poster, _thread())
    gateway.join_thread_room(helper, _thread())

    asyncio.run(gateway.publish_message(1, _message()))

    assert poster.types() == ["new-message"]
    assert helper.sent[0]["data"]["message"]["id"] == 10
    assert elsewhere.sent == []


def test_notifications_reach_every_connection_of_the_user() -> None:
    gateway = RealtimeGateway()
    first, second, other = FakeConnection(), FakeConnection(), FakeConnection()
    gateway.register(2, first)
    gateway.register(2, second)
    gateway.register(1, other)

    asyncio.run(gateway.publish_notification(2, _notification(2)))

    assert first.types() == second.types() == ["new-notification"]
    assert first.sent[0]["data"]["notification"]["metadata"]["thread_id"] == 1
    assert other.sent == []


def test_failed_write_drops_the_connection_and_continues(caplog) -> None:
    gateway = RealtimeGateway()
    dead, alive = FakeConnection(fail=True), FakeConnection()
    gateway.register(1, dead)
    gateway.register(2, alive)
    gateway.join_thread_room(dead, _thread())
    gateway.join_thread_room(alive, _thread())

    with caplog.at_level(logging.WARNING):
        asyncio.run(gateway.publish_message(1, _message()))

    assert alive.types() == ["new-message"]
    assert gateway.room_size(1) == 1
    assert not gateway.is_user_connected(1)
    assert "Dropping realtime connection" in caplog.text


def test_thread_created_goes_to_both_participants() -> None:
    gateway = RealtimeGateway()
    poster, helper = FakeConnection(), FakeConnection()
    gateway.register(1, poster)
    gateway.register(2, helper)

    asyncio.run(gateway.publish_thread_created(_thread()))

    assert poster.types() == helper.types() == ["thread-created"]


def test_read_events_carry_their_counts() -> None:
    gateway = RealtimeGateway()
    connection = FakeConnection()
    gateway.register(2, connection)
    gateway.join_thread_room(connection, _thread())

    async def scenario() -> None:
        await gateway.publish_messages_read(1, 2, 3)
        await gateway.publish_message_deleted(1, 10)
        await gateway.publish_notification_read(2, 7)
        await gateway.publish_all_notifications_read(2, 4)

    asyncio.run(scenario())

    assert connection.sent == [
        {"type": "messages-read", "data": {"thread_id": 1, "user_id": 2, "count": 3}},
        {"type": "message-deleted", "data": {"thread_id": 1, "message_id": 10}},
        {"type": "notification-read", "data": {"notification_id": 7}},
        {"type": "notifications-read-all", "data": {"count": 4}},
    ]
