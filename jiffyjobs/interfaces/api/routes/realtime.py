"""Websocket endpoint streaming chat and notification events."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect, status

from jiffyjobs.domain.entities import User
from jiffyjobs.domain.errors import ChatError, NotFoundError
from jiffyjobs.infrastructure.database import SessionLocal
from jiffyjobs.infrastructure.realtime import RealtimeGateway
from jiffyjobs.infrastructure.realtime import events
from jiffyjobs.infrastructure.repositories import ChatThreadRepository
from jiffyjobs.interfaces.api.dependencies import resolve_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


def _authenticate(token: str) -> User:
    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
    finally:
        session.close()
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return user


def _parse_thread_id(data: Any) -> int:
    raw = data.get("thread_id") if isinstance(data, dict) else None
    try:
        thread_id = int(raw)
    except (TypeError, ValueError) as exc:
        raise NotFoundError("Thread not found") from exc
    if thread_id <= 0:
        raise NotFoundError("Thread not found")
    return thread_id


async def _join_thread(
    gateway: RealtimeGateway, websocket: WebSocket, data: Any
) -> None:
    thread_id = _parse_thread_id(data)
    session = SessionLocal()
    try:
        thread = ChatThreadRepository(session).get(thread_id)
    finally:
        session.close()
    if thread is None:
        raise NotFoundError("Thread not found")
    gateway.join_thread_room(websocket, thread)
    await websocket.send_json(events.envelope(events.THREAD_JOINED, {"thread_id": thread_id}))


async def _leave_thread(
    gateway: RealtimeGateway, websocket: WebSocket, data: Any
) -> None:
    thread_id = _parse_thread_id(data)
    gateway.leave_thread_room(websocket, thread_id)
    await websocket.send_json(events.envelope(events.THREAD_LEFT, {"thread_id": thread_id}))


@router.websocket("/ws")
async def realtime_websocket(websocket: WebSocket) -> None:
    """Authenticate with ``?token=`` and then relay room membership commands."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    try:
        user = _authenticate(token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    gateway: RealtimeGateway = websocket.app.state.realtime_gateway
    await gateway.connect(user.id, websocket)
    try:
        await websocket.send_json(events.envelope(events.CONNECTED, {"user_id": user.id}))
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                await websocket.send_json(events.error_event("invalid_message", "Malformed JSON"))
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            data = message.get("data")
            try:
                if message_type == events.JOIN_THREAD:
                    await _join_thread(gateway, websocket, data)
                elif message_type == events.LEAVE_THREAD:
                    await _leave_thread(gateway, websocket, data)
                elif message_type == events.PING:
                    await websocket.send_json(events.envelope(events.PONG))
                else:
                    logger.debug("Ignoring websocket message of type %r", message_type)
            except ChatError as exc:
                await websocket.send_json(events.error_event(exc.code, str(exc)))
    except WebSocketDisconnect:
        logger.debug("Websocket closed for user %s", user.id)
    finally:
        gateway.disconnect(websocket)
