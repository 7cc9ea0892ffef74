"""Tests for batching notification emails."""

from __future__ import annotations

from jiffyjobs.application.use_cases.notifications import NotificationEmailThrottle
from jiffyjobs.domain.entities import User


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class Outbox:
    def __init__(self) -> None:
        self.single: list[tuple] = []
        self.digests: list[tuple] = []

    def send_single(self, recipient, name, title, message, link) -> bool:
        self.single.append((recipient, title))
        return True

    def send_digest(self, recipient, name, items, link) -> bool:
        self.digests.append((recipient, list(items)))
        return True


def _throttle(outbox: Outbox, clock: FakeClock) -> NotificationEmailThrottle:
    return NotificationEmailThrottle(
        300,
        send_single=outbox.send_single,
        send_digest=outbox.send_digest,
        clock=clock,
    )


def test_first_email_is_sent_immediately_and_later_ones_are_queued() -> None:
    outbox, clock = Outbox(), FakeClock()
    throttle = _throttle(outbox, clock)
    user = User(id=1, name="Hugo", email="hugo@example.com")

    assert throttle.submit(user, "New Message", "first", "http://app/tasks/1") is True
    clock.now += 60
    assert throttle.submit(user, "New Message", "second", "http://app/tasks/1") is False

    assert outbox.single == [("hugo@example.com", "New Message")]
    assert throttle.pending_for(1) == [("New Message", "second")]


def test_queued_notifications_go_out_as_one_digest_after_the_window() -> None:
    outbox, clock = Outbox(), FakeClock()
    throttle = _throttle(outbox, clock)
    user = User(id=1, name="Hugo", email="hugo@example.com")

    throttle.submit(user, "New Message", "first", "link")
    clock.now += 10
    throttle.submit(user, "Bid Accepted", "second", "link")
    clock.now += 300
    assert throttle.submit(user, "Task Updated", "third", "link") is True

    assert outbox.digests == [
        ("hugo@example.com", [("Bid Accepted", "second"), ("Task Updated", "third")])
    ]
    assert throttle.pending_for(1) == []


def test_users_are_throttled_independently() -> None:
    outbox, clock = Outbox(), FakeClock()
    throttle = _throttle(outbox, clock)

    throttle.submit(User(id=1, name="A", email="a@example.com"), "t", "m", "link")
    throttle.submit(User(id=2, name="B", email="b@example.com"), "t", "m", "link")

    assert [recipient for recipient, _ in outbox.single] == ["a@example.com", "b@example.com"]


def test_users_without_address_are_skipped() -> None:
    outbox, clock = Outbox(), FakeClock()
    throttle = _throttle(outbox, clock)

    assert throttle.submit(User(id=3, name="C", email=""), "t", "m", "link") is False
    assert outbox.single == []
