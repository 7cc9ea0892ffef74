"""In-process registry of live websocket connections and thread rooms.

All mutations happen on the server's event loop, so the maps below are never
touched concurrently. State lives only as long as the connections it tracks.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, DefaultDict, Iterable, Set

from fastapi import WebSocket

from jiffyjobs.domain.entities import ChatMessage, ChatThread, Notification
from jiffyjobs.domain.errors import TransientDeliveryFailure, UnauthorizedError

from . import events

logger = logging.getLogger(__name__)


class RealtimeGateway:
    """Track connections per user and per thread room and fan events out to them."""

    def __init__(self) -> None:
        self._user_by_connection: dict[WebSocket, int] = {}
        self._connections_by_user: DefaultDict[int, Set[WebSocket]] = defaultdict(set)
        self._room_members: DefaultDict[int, Set[WebSocket]] = defaultdict(set)
        self._rooms_by_connection: DefaultDict[WebSocket, Set[int]] = defaultdict(set)

    # -- connection lifecycle -------------------------------------------------

    async def connect(self, user_id: int, websocket: WebSocket) -> None:
        """Accept the websocket connection and register it for ``user_id``."""

        await websocket.accept()
        self.register(user_id, websocket)

    def register(self, user_id: int, connection: WebSocket) -> None:
        """Record ``connection`` as belonging to ``user_id``; repeated calls are no-ops."""

        current = self._user_by_connection.get(connection)
        if current == user_id:
            return
        if current is not None:
            raise ValueError("Connection is already registered for another user")
        self._user_by_connection[connection] = user_id
        self._connections_by_user[user_id].add(connection)
        logger.info("Realtime connection opened for user %s", user_id)

    def disconnect(self, connection: WebSocket) -> None:
        """Forget ``connection`` and every room it had joined."""

        user_id = self._user_by_connection.pop(connection, None)
        for thread_id in self._rooms_by_connection.pop(connection, set()):
            self._discard_member(thread_id, connection)
        if user_id is None:
            return
        connections = self._connections_by_user.get(user_id)
        if connections is not None:
            connections.discard(connection)
            if not connections:
                self._connections_by_user.pop(user_id, None)
        logger.info("Realtime connection closed for user %s", user_id)

    # -- rooms ----------------------------------------------------------------

    def join_thread_room(self, connection: WebSocket, thread: ChatThread) -> None:
        """Subscribe ``connection`` to live updates of ``thread``.

        Raises :class:`UnauthorizedError` when the connection is unknown or its
        user is not the thread's poster or helper.
        """

        user_id = self._user_by_connection.get(connection)
        if user_id is None:
            raise UnauthorizedError("Connection is not authenticated")
        if not thread.has_participant(user_id):
            raise UnauthorizedError("You are not part of this chat thread")
        self._room_members[thread.id].add(connection)
        self._rooms_by_connection[connection].add(thread.id)
        logger.info("User %s joined thread room %s", user_id, thread.id)

    def leave_thread_room(self, connection: WebSocket, thread_id: int) -> None:
        """Unsubscribe ``connection`` from ``thread_id``; unknown pairs are ignored."""

        rooms = self._rooms_by_connection.get(connection)
        if rooms is None or thread_id not in rooms:
            return
        rooms.discard(thread_id)
        if not rooms:
            self._rooms_by_connection.pop(connection, None)
        self._discard_member(thread_id, connection)

    def _discard_member(self, thread_id: int, connection: WebSocket) -> None:
        members = self._room_members.get(thread_id)
        if members is None:
            return
        members.discard(connection)
        if not members:
            self._room_members.pop(thread_id, None)

    # -- introspection --------------------------------------------------------

    def is_user_connected(self, user_id: int) -> bool:
        return bool(self._connections_by_user.get(user_id))

    def room_size(self, thread_id: int) -> int:
        return len(self._room_members.get(thread_id, ()))

    def rooms_of(self, connection: WebSocket) -> frozenset[int]:
        return frozenset(self._rooms_by_connection.get(connection, ()))

    @property
    def connection_count(self) -> int:
        return len(self._user_by_connection)

    # -- publishing -----------------------------------------------------------

    async def publish_message(self, thread_id: int, message: ChatMessage) -> None:
        """Send ``new-message`` to every connection in the thread's room."""

        await self.send_to_room(thread_id, events.new_message_event(thread_id, message))

    async def publish_messages_read(self, thread_id: int, reader_id: int, count: int) -> None:
        await self.send_to_room(
            thread_id, events.messages_read_event(thread_id, reader_id, count)
        )

    async def publish_message_deleted(self, thread_id: int, message_id: int) -> None:
        await self.send_to_room(
            thread_id, events.message_deleted_event(thread_id, message_id)
        )

    async def publish_thread_created(self, thread: ChatThread) -> None:
        message = events.thread_created_event(thread)
        for user_id in {thread.poster_id, thread.helper_id}:
            await self.send_to_user(user_id, message)

    async def publish_notification(self, user_id: int, notification: Notification) -> None:
        """Send ``new-notification`` to every connection of ``user_id``."""

        await self.send_to_user(user_id, events.new_notification_event(notification))

    async def publish_notification_read(self, user_id: int, notification_id: int) -> None:
        await self.send_to_user(user_id, events.notification_read_event(notification_id))

    async def publish_all_notifications_read(self, user_id: int, count: int) -> None:
        await self.send_to_user(user_id, events.all_notifications_read_event(count))

    async def send_to_room(self, thread_id: int, message: dict[str, Any]) -> None:
        await self._fan_out(list(self._room_members.get(thread_id, set())), message)

    async def send_to_user(self, user_id: int, message: dict[str, Any]) -> None:
        """Send ``message`` to every active connection for ``user_id``."""

        await self._fan_out(list(self._connections_by_user.get(user_id, set())), message)

    async def _fan_out(self, connections: Iterable[WebSocket], message: dict[str, Any]) -> None:
        for connection in connections:
            try:
                await self._deliver(connection, message)
            except TransientDeliveryFailure as exc:
                logger.warning(
                    "Dropping realtime connection of user %s after failed write: %s",
                    self._user_by_connection.get(connection),
                    exc.__cause__ or exc,
                )
                self.disconnect(connection)

    @staticmethod
    async def _deliver(connection: WebSocket, message: dict[str, Any]) -> None:
        try:
            await connection.send_json(message)
        except Exception as exc:
            raise TransientDeliveryFailure("Realtime write failed") from exc


__all__ = ["RealtimeGateway"]
