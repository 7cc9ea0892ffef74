"""Tests for handing publishes from request code to the event loop."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import anyio

from jiffyjobs.domain.entities import ChatMessage, ChatThread
from jiffyjobs.infrastructure.realtime import RealtimeGateway, RealtimePublisher


class FakeConnection:
    def __init__(self) -> None:
        self.sent: list[dict] = []

    async def send_json(self, data: dict) -> None:
        self.sent.append(data)


def _message() -> ChatMessage:
    return ChatMessage(
        id=1,
        thread_id=1,
        sender_id=1,
        receiver_id=2,
        body="hello",
        created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )


def test_publish_without_event_loop_is_dropped() -> None:
    gateway = RealtimeGateway()
    connection = FakeConnection()
    gateway.register(2, connection)

    RealtimePublisher(gateway).all_notifications_read(2, 1)

    assert connection.sent == []


def test_publish_on_the_loop_is_scheduled_as_a_task() -> None:
    gateway = RealtimeGateway()
    connection = FakeConnection()
    gateway.register(2, connection)
    publisher = RealtimePublisher(gateway)

    async def scenario() -> None:
        publisher.notification_read(2, 5)
        await asyncio.sleep(0)

    asyncio.run(scenario())

    assert connection.sent == [{"type": "notification-read", "data": {"notification_id": 5}}]


def test_publish_from_worker_thread_is_delivered_on_the_loop() -> None:
    gateway = RealtimeGateway()
    connection = FakeConnection()
    gateway.register(1, connection)
    gateway.join_thread_room(connection, ChatThread(id=1, task_id=1, poster_id=1, helper_id=2))
    publisher = RealtimePublisher(gateway)

    async def scenario() -> None:
        await anyio.to_thread.run_sync(publisher.message_created, _message())
        await publisher.drain()

    anyio.run(scenario)

    assert [event["type"] for event in connection.sent] == ["new-message"]


class GatedConnection(FakeConnection):
    """Holds ``new-message`` writes until ``gate`` is set."""

    def __init__(self, gate: asyncio.Event) -> None:
        super().__init__()
        self.gate = gate

    async def send_json(self, data: dict) -> None:
        if data["type"] == "new-message":
            await self.gate.wait()
        self.sent.append(data)


def test_worker_thread_returns_before_slow_writes_finish() -> None:
    gateway = RealtimeGateway()
    publisher = RealtimePublisher(gateway)
    observed: list[list[dict]] = []

    async def scenario() -> None:
        gate = asyncio.Event()
        connection = GatedConnection(gate)
        gateway.register(1, connection)
        gateway.join_thread_room(
            connection, ChatThread(id=1, task_id=1, poster_id=1, helper_id=2)
        )

        await anyio.to_thread.run_sync(publisher.message_created, _message())
        observed.append(list(connection.sent))

        gate.set()
        await publisher.drain()
        observed.append(list(connection.sent))

    anyio.run(scenario)

    assert observed[0] == []
    assert [event["type"] for event in observed[1]] == ["new-message"]


def test_queued_deliveries_keep_publish_order() -> None:
    gateway = RealtimeGateway()
    publisher = RealtimePublisher(gateway)
    sent: list[dict] = []

    async def scenario() -> None:
        gate = asyncio.Event()
        connection = GatedConnection(gate)
        connection.sent = sent
        gateway.register(1, connection)
        gateway.join_thread_room(
            connection, ChatThread(id=1, task_id=1, poster_id=1, helper_id=2)
        )

        publisher.message_created(_message())
        publisher.notification_read(1, 9)
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        gate.set()
        await publisher.drain()

    asyncio.run(scenario())

    assert [event["type"] for event in sent] == ["new-message", "notification-read"]
