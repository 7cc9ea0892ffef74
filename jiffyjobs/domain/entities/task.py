"""Domain entities for the task and bid rows chat threads hang off."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

BID_STATUS_PENDING = "PENDING"
BID_STATUS_ACCEPTED = "ACCEPTED"
BID_STATUS_REJECTED = "REJECTED"
BID_STATUS_WITHDRAWN = "WITHDRAWN"


@dataclass
class Task:
    """A job posted by a poster that helpers can bid on."""

    id: int | None
    title: str
    status: str
    poster_id: int
    assigned_helper_id: int | None = None
    created_at: datetime | None = None


@dataclass
class Bid:
    """An offer a helper placed on a task."""

    id: int | None
    task_id: int
    helper_id: int
    amount: Decimal
    status: str = BID_STATUS_PENDING
    created_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == BID_STATUS_PENDING


__all__ = [
    "BID_STATUS_ACCEPTED",
    "BID_STATUS_PENDING",
    "BID_STATUS_REJECTED",
    "BID_STATUS_WITHDRAWN",
    "Bid",
    "Task",
]
