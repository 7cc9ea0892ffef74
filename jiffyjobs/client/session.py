"""Glue between the realtime connection, the polling fallback and local state."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Sequence

from .api import ChatApiClient
from .polling import (
    DEFAULT_POLL_INTERVAL,
    MESSAGE_PAGE_SIZE,
    PollingFallback,
    pull_newest_messages,
    pull_notifications,
)
from .realtime import RealtimeConnection
from .state import MessageView, NotificationFeed, NotificationView, ThreadState

logger = logging.getLogger(__name__)


class ChatSession:
    """State of one signed-in user: the open thread and the notification feed.

    Websocket events and REST pulls both land in the same :class:`ThreadState`
    and :class:`NotificationFeed`, so nothing is shown twice. Polling runs only
    while the websocket is down, and keeps running after a reconnect until the
    server has acknowledged the thread room, at which point one more pull
    closes the gap.
    """

    def __init__(
        self,
        api: ChatApiClient,
        viewer_id: int,
        *,
        connection: RealtimeConnection | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        page_size: int = MESSAGE_PAGE_SIZE,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.api = api
        self.viewer_id = viewer_id
        self.notifications = NotificationFeed()
        self.thread: ThreadState | None = None
        self.poll_interval = poll_interval
        self.page_size = page_size
        self._sleep = sleep
        self._polling: PollingFallback | None = None
        self._history_page = 1
        self._has_older = False
        self.connection = connection
        self.connected = False
        if connection is not None:
            connection.on_event = self.handle_event
            connection.on_state_change = self.handle_connection_state

    @property
    def is_polling(self) -> bool:
        return self._polling is not None and self._polling.is_running

    @property
    def has_older(self) -> bool:
        return self._has_older

    async def load_notifications(self) -> list[NotificationView]:
        return await pull_notifications(self.api, self.notifications)

    async def open_thread(self, thread_id: int) -> ThreadState:
        """Load the newest page of ``thread_id``, join its room and mark it read.

        With a live connection the room join is acknowledged by a
        ``thread-joined`` event, which triggers a second pull for anything
        sent between the first one and the join.
        """

        if self.thread is not None and self.thread.thread_id != thread_id:
            await self.close_thread()
        if self.thread is None:
            self.thread = ThreadState(thread_id, self.viewer_id)
            self._polling = PollingFallback(
                self.api,
                self.thread,
                feed=self.notifications,
                interval=self.poll_interval,
                page_size=self.page_size,
                sleep=self._sleep,
                on_new_messages=self._on_polled_messages,
            )
            page = await self.api.list_messages(thread_id, page=1, limit=self.page_size)
            payloads = page.get("messages", [])
            self.thread.merge(payloads)
            self.thread.record_pull(max((int(item["id"]) for item in payloads), default=None))
            self._history_page = 1
            self._has_older = bool((page.get("pagination") or {}).get("has_next"))
        else:
            await pull_newest_messages(self.api, self.thread, page_size=self.page_size)
        if self.connection is not None:
            await self.connection.join_thread(thread_id)
        if not self.connected:
            self._polling.start()
        await self._mark_open_thread_read()
        return self.thread

    async def load_older(self) -> list[MessageView]:
        """Merge the next page of older history; an empty list once it is exhausted."""

        if self.thread is None:
            raise RuntimeError("Open a thread before loading its history")
        added: list[MessageView] = []
        # New messages shift the pages, so an older page can hold only known ids.
        while self._has_older and not added:
            self._history_page += 1
            page = await self.api.list_messages(
                self.thread.thread_id, page=self._history_page, limit=self.page_size
            )
            added = self.thread.merge(page.get("messages", []))
            self._has_older = bool((page.get("pagination") or {}).get("has_next"))
        return added

    async def close_thread(self) -> None:
        thread, self.thread = self.thread, None
        polling, self._polling = self._polling, None
        self._history_page = 1
        self._has_older = False
        if polling is not None:
            await polling.stop()
        if thread is not None and self.connection is not None:
            await self.connection.leave_thread(thread.thread_id)

    async def send(self, body: str) -> dict[str, Any]:
        if self.thread is None:
            raise RuntimeError("Open a thread before sending messages")
        message = await self.api.send_message(self.thread.thread_id, body)
        self.thread.merge([message])
        return message

    async def mark_all_notifications_read(self) -> int:
        count = await self.api.mark_all_notifications_read()
        self.notifications.apply_all_read()
        return count

    async def _mark_open_thread_read(self) -> None:
        if self.thread is None or self.thread.unread_count == 0:
            return
        await self.api.mark_thread_read(self.thread.thread_id)
        self.thread.apply_messages_read(self.viewer_id)

    async def _on_polled_messages(self, added: Sequence[MessageView]) -> None:
        if any(message.receiver_id == self.viewer_id for message in added):
            await self._mark_open_thread_read()

    async def _resume_thread(self) -> None:
        if self.thread is None:
            return
        if self._polling is not None:
            await self._polling.stop()
        await pull_newest_messages(self.api, self.thread, page_size=self.page_size)
        await self._mark_open_thread_read()

    async def catch_up(self) -> None:
        """Pull everything sent while offline: open thread messages and notifications."""

        if self.thread is not None:
            await pull_newest_messages(self.api, self.thread, page_size=self.page_size)
            await self._mark_open_thread_read()
        await self.load_notifications()

    async def handle_connection_state(self, connected: bool) -> None:
        self.connected = connected
        if not connected:
            if self._polling is not None:
                logger.info(
                    "Realtime connection lost; polling every %.1f seconds", self.poll_interval
                )
                self._polling.start()
            return
        # The user's own channel is live once ``connected`` arrives.
        await self.load_notifications()
        if self.connection is None:
            await self._resume_thread()

    async def handle_event(self, event: dict[str, Any]) -> None:
        event_type = event.get("type")
        data = event.get("data") or {}
        thread = self.thread

        if event_type == "thread-joined":
            if thread is not None and data.get("thread_id") == thread.thread_id and self.connected:
                await self._resume_thread()
        elif event_type == "new-message":
            if thread is None or data.get("thread_id") != thread.thread_id:
                return
            added = thread.merge([data["message"]])
            if any(message.receiver_id == self.viewer_id for message in added):
                await self._mark_open_thread_read()
        elif event_type == "messages-read":
            if thread is not None and data.get("thread_id") == thread.thread_id:
                thread.apply_messages_read(int(data["user_id"]))
        elif event_type == "message-deleted":
            if thread is not None and data.get("thread_id") == thread.thread_id:
                thread.apply_message_deleted(int(data["message_id"]))
        elif event_type == "new-notification":
            self.notifications.merge([data["notification"]])
        elif event_type == "notification-read":
            self.notifications.apply_read(int(data["notification_id"]))
        elif event_type == "notifications-read-all":
            self.notifications.apply_all_read()
        elif event_type == "error":
            logger.warning("Realtime error %s: %s", data.get("code"), data.get("detail"))


__all__ = ["ChatSession"]
