"""Throttle notification emails so each user gets at most one per window."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Sequence

from jiffyjobs.domain.entities import User
from jiffyjobs.infrastructure.email import (
    send_notification_digest_email,
    send_notification_email,
)

logger = logging.getLogger(__name__)

SingleSender = Callable[[str, str, str, str, str], bool]
DigestSender = Callable[[str, str, Sequence[tuple[str, str]], str], bool]


@dataclass
class _UserThrottleState:
    last_sent: float
    pending: list[tuple[str, str]] = field(default_factory=list)


class NotificationEmailThrottle:
    """Send the first email right away and batch later ones into a digest.

    Notifications arriving within ``window_seconds`` of the last email are
    queued; the next notification after the window closes is sent together
    with everything queued.
    """

    def __init__(
        self,
        window_seconds: float,
        *,
        send_single: SingleSender = send_notification_email,
        send_digest: DigestSender = send_notification_digest_email,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.window_seconds = window_seconds
        self._send_single = send_single
        self._send_digest = send_digest
        self._clock = clock
        self._states: dict[int, _UserThrottleState] = {}
        self._lock = threading.Lock()

    def submit(self, user: User, title: str, message: str, link: str) -> bool:
        """Email ``user`` now or queue the notification; return whether mail went out."""

        if user.id is None or not user.email:
            logger.warning("Cannot email notification: user %s has no address", user.id)
            return False

        now = self._clock()
        with self._lock:
            state = self._states.get(user.id)
            if state is None:
                self._states[user.id] = _UserThrottleState(last_sent=now)
                batch: list[tuple[str, str]] = []
            elif now - state.last_sent >= self.window_seconds:
                batch = state.pending + [(title, message)] if state.pending else []
                state.pending = []
                state.last_sent = now
            else:
                state.pending.append((title, message))
                return False

        if batch:
            return self._send_digest(user.email, user.display_name, batch, link)
        return self._send_single(user.email, user.display_name, title, message, link)

    def pending_for(self, user_id: int) -> list[tuple[str, str]]:
        state = self._states.get(user_id)
        return list(state.pending) if state else []


__all__ = ["NotificationEmailThrottle"]
