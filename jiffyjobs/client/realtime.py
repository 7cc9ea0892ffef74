"""Websocket client that keeps a live connection to the realtime gateway."""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from typing import Any, Awaitable, Callable
from urllib.parse import urlencode

import aiohttp

logger = logging.getLogger(__name__)

INITIAL_BACKOFF = 0.5
MAX_BACKOFF = 5.0

EventHandler = Callable[[dict[str, Any]], Awaitable[None] | None]
StateHandler = Callable[[bool], Awaitable[None] | None]


def next_backoff(current: float) -> float:
    return min(current * 2, MAX_BACKOFF)


async def _maybe_await(result: Awaitable[None] | None) -> None:
    if inspect.isawaitable(result):
        await result


class RealtimeConnection:
    """Connect to ``/ws``, re-join rooms after every reconnect and hand events to a callback.

    ``on_state_change`` receives ``True`` once the server confirms the
    connection and ``False`` when it drops, which is what drives the polling
    fallback on and off.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        on_event: EventHandler | None = None,
        on_state_change: StateHandler | None = None,
        heartbeat: float = 20.0,
        session_factory: Callable[[], aiohttp.ClientSession] = aiohttp.ClientSession,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.url = f"{base_url.rstrip('/')}/ws?{urlencode({'token': token})}"
        self.on_event = on_event
        self.on_state_change = on_state_change
        self.heartbeat = heartbeat
        self._session_factory = session_factory
        self._sleep = sleep
        self._rooms: set[int] = set()
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._stopped = asyncio.Event()
        self.connected = False

    @property
    def rooms(self) -> frozenset[int]:
        return frozenset(self._rooms)

    async def join_thread(self, thread_id: int) -> None:
        self._rooms.add(thread_id)
        await self._send({"type": "join-thread", "data": {"thread_id": thread_id}})

    async def leave_thread(self, thread_id: int) -> None:
        self._rooms.discard(thread_id)
        await self._send({"type": "leave-thread", "data": {"thread_id": thread_id}})

    async def ping(self) -> None:
        await self._send({"type": "ping"})

    async def _send(self, payload: dict[str, Any]) -> None:
        ws = self._ws
        if ws is None or ws.closed:
            return
        await ws.send_json(payload)

    async def _set_connected(self, value: bool) -> None:
        if self.connected == value:
            return
        self.connected = value
        if self.on_state_change is not None:
            await _maybe_await(self.on_state_change(value))

    async def _dispatch(self, raw: str) -> None:
        try:
            event = json.loads(raw)
        except json.JSONDecodeError:
            logger.debug("Ignoring malformed websocket frame")
            return
        if not isinstance(event, dict):
            return
        if event.get("type") == "connected":
            for thread_id in sorted(self._rooms):
                await self._send({"type": "join-thread", "data": {"thread_id": thread_id}})
            await self._set_connected(True)
        if self.on_event is not None:
            await _maybe_await(self.on_event(event))

    async def _listen(self, session: aiohttp.ClientSession) -> None:
        async with session.ws_connect(self.url, heartbeat=self.heartbeat) as ws:
            self._ws = ws
            try:
                async for msg in ws:
                    if msg.type == aiohttp.WSMsgType.TEXT:
                        await self._dispatch(msg.data)
                    elif msg.type in (aiohttp.WSMsgType.CLOSED, aiohttp.WSMsgType.ERROR):
                        break
                    if self._stopped.is_set():
                        break
            finally:
                self._ws = None

    async def run(self) -> None:
        """Keep the connection alive until :meth:`close` is called."""

        backoff = INITIAL_BACKOFF
        while not self._stopped.is_set():
            try:
                async with self._session_factory() as session:
                    await self._listen(session)
            except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
                logger.warning("Realtime connection failed: %s", exc)
            was_connected = self.connected
            await self._set_connected(False)
            if self._stopped.is_set():
                break
            if was_connected:
                backoff = INITIAL_BACKOFF
            logger.debug("Reconnecting in %.1f seconds", backoff)
            await self._sleep(backoff)
            backoff = next_backoff(backoff)

    async def close(self) -> None:
        self._stopped.set()
        ws = self._ws
        if ws is not None and not ws.closed:
            await ws.close()


__all__ = ["INITIAL_BACKOFF", "MAX_BACKOFF", "RealtimeConnection", "next_backoff"]
