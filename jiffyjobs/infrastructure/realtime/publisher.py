"""Schedule realtime deliveries from synchronous request handlers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from anyio import from_thread

from jiffyjobs.domain.entities import ChatMessage, ChatThread, Notification

from .gateway import RealtimeGateway

logger = logging.getLogger(__name__)


class RealtimePublisher:
    """Queue gateway publishes on the event loop without waiting for the writes.

    Use cases run inside FastAPI's worker threads, so the delivery task is
    created on the loop through :func:`anyio.from_thread.run_sync` and the
    request returns straight away. Deliveries are chained so they reach each
    socket in the order they were published. With no loop reachable at all
    (scripts, plain unit tests) the event is dropped: clients pick the record
    up through the REST API.
    """

    def __init__(self, gateway: RealtimeGateway) -> None:
        self._gateway = gateway
        self._pending: set[asyncio.Task[None]] = set()
        self._tail: asyncio.Task[None] | None = None

    @property
    def gateway(self) -> RealtimeGateway:
        return self._gateway

    def message_created(self, message: ChatMessage) -> None:
        self._schedule(self._gateway.publish_message, message.thread_id, message)

    def messages_read(self, thread_id: int, reader_id: int, count: int) -> None:
        self._schedule(self._gateway.publish_messages_read, thread_id, reader_id, count)

    def message_deleted(self, message: ChatMessage) -> None:
        self._schedule(self._gateway.publish_message_deleted, message.thread_id, message.id)

    def thread_created(self, thread: ChatThread) -> None:
        self._schedule(self._gateway.publish_thread_created, thread)

    def notification_created(self, notification: Notification) -> None:
        self._schedule(self._gateway.publish_notification, notification.user_id, notification)

    def notification_read(self, user_id: int, notification_id: int) -> None:
        self._schedule(self._gateway.publish_notification_read, user_id, notification_id)

    def all_notifications_read(self, user_id: int, count: int) -> None:
        self._schedule(self._gateway.publish_all_notifications_read, user_id, count)

    async def drain(self) -> None:
        """Wait until every queued delivery has been written."""

        loop = asyncio.get_running_loop()
        while True:
            pending = {task for task in self._pending if task.get_loop() is loop}
            if not pending:
                return
            await asyncio.wait(pending)

    def _schedule(self, func: Callable[..., Awaitable[None]], *args: Any) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run_sync(self._spawn, func, *args)
            except RuntimeError:
                logger.debug(
                    "No event loop reachable; %s not delivered in realtime",
                    getattr(func, "__name__", func),
                )
        else:
            self._spawn(func, *args)

    def _spawn(self, func: Callable[..., Awaitable[None]], *args: Any) -> None:
        loop = asyncio.get_running_loop()
        previous = self._tail
        if previous is not None and previous.get_loop() is not loop:
            previous = None
        task = loop.create_task(self._deliver(previous, func, *args))
        self._tail = task
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @staticmethod
    async def _deliver(
        previous: asyncio.Task[None] | None,
        func: Callable[..., Awaitable[None]],
        *args: Any,
    ) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait({previous})
        try:
            await func(*args)
        except Exception:
            logger.exception("Realtime delivery %s failed", getattr(func, "__name__", func))


__all__ = ["RealtimePublisher"]
