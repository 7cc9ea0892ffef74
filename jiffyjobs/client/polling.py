"""Periodic REST pulls used while the websocket is down."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Sequence

import httpx

from .api import ChatApiClient, ChatApiError
from .state import MessageView, NotificationFeed, NotificationView, ThreadState

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0
MIN_POLL_INTERVAL = 3.0
MESSAGE_PAGE_SIZE = 50
NOTIFICATION_PAGE_SIZE = 20
UNREAD_SYNC_PAGE_SIZE = 100


def _has_next(page: Mapping[str, Any]) -> bool:
    return bool((page.get("pagination") or {}).get("has_next"))


async def pull_newest_messages(
    api: ChatApiClient, thread: ThreadState, *, page_size: int = MESSAGE_PAGE_SIZE
) -> list[MessageView]:
    """Merge the newest messages of ``thread``, walking back until the gap is closed.

    The first pull of a thread fetches one page. Later pulls keep fetching
    older pages until one reaches ``thread.synced_through`` or the history
    runs out, so an outage longer than a page loses nothing.
    """

    watermark = thread.synced_through
    added: list[MessageView] = []
    newest: int | None = None
    page_number = 1
    while True:
        page = await api.list_messages(thread.thread_id, page=page_number, limit=page_size)
        payloads = page.get("messages", [])
        ids = [int(payload["id"]) for payload in payloads]
        if page_number == 1 and ids:
            newest = max(ids)
        added.extend(thread.merge(payloads))
        if watermark is None or any(message_id <= watermark for message_id in ids):
            break
        if not _has_next(page):
            break
        page_number += 1
    thread.record_pull(newest)
    return sorted(added, key=lambda message: message.sort_key)


async def pull_notifications(
    api: ChatApiClient, feed: NotificationFeed, *, page_size: int = NOTIFICATION_PAGE_SIZE
) -> list[NotificationView]:
    """Merge the newest notifications and bring the local unread set in line with the server.

    When the server's ``unread_count`` differs from the local one, every
    unread notification is fetched so the badge counts all of them, not just
    those on the first page.
    """

    page = await api.list_notifications(page=1, limit=page_size)
    listed = page.get("notifications", [])
    added = feed.merge(listed)
    server_unread = page.get("unread_count")
    if server_unread is None or int(server_unread) == feed.unread_count:
        return added

    unread: list[Mapping[str, Any]] = []
    page_number = 1
    while True:
        chunk = await api.list_notifications(
            page=page_number, limit=UNREAD_SYNC_PAGE_SIZE, unread_only=True
        )
        unread.extend(chunk.get("notifications", []))
        if not _has_next(chunk):
            break
        page_number += 1
    up_to_id = max((int(item["id"]) for item in [*listed, *unread]), default=0)
    added.extend(feed.reconcile_unread(unread, up_to_id=up_to_id))
    logger.debug(
        "Unread notifications resynced: server %s, local %s", server_unread, feed.unread_count
    )
    return added


class PollingFallback:
    """Pull the newest messages of a thread (and optionally notifications) on an interval."""

    def __init__(
        self,
        api: ChatApiClient,
        thread: ThreadState,
        *,
        feed: NotificationFeed | None = None,
        interval: float = DEFAULT_POLL_INTERVAL,
        page_size: int = MESSAGE_PAGE_SIZE,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_new_messages: Callable[[Sequence[MessageView]], Awaitable[None]] | None = None,
    ) -> None:
        if interval < MIN_POLL_INTERVAL:
            raise ValueError(
                f"Poll interval must be at least {MIN_POLL_INTERVAL} seconds, got {interval}"
            )
        self.api = api
        self.thread = thread
        self.feed = feed
        self.interval = interval
        self.page_size = page_size
        self._sleep = sleep
        self._on_new_messages = on_new_messages
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> list[MessageView]:
        """Fetch once and merge; return the messages that were not known before."""

        added = await pull_newest_messages(self.api, self.thread, page_size=self.page_size)
        if self.feed is not None:
            await pull_notifications(self.api, self.feed)
        if added:
            logger.debug(
                "Polling picked up %s message(s) for thread %s", len(added), self.thread.thread_id
            )
            if self._on_new_messages is not None:
                await self._on_new_messages(added)
        return added

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except (ChatApiError, httpx.HTTPError) as exc:
                logger.warning("Polling thread %s failed: %s", self.thread.thread_id, exc)
            await self._sleep(self.interval)

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "MIN_POLL_INTERVAL",
    "PollingFallback",
    "pull_newest_messages",
    "pull_notifications",
]
