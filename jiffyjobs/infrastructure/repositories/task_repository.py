"""Persistence helpers for the task and bid rows chat depends on."""

from __future__ import annotations

from sqlalchemy.orm import Session

from jiffyjobs.domain.entities import BID_STATUS_PENDING, Bid, Task
from jiffyjobs.infrastructure.models import BidModel, TaskModel
from jiffyjobs.utils import from_storage


class TaskRepository:
    """Look up tasks and bids and record the minimal rows seed scripts need."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, task_id: int) -> Task | None:
        model = self.session.get(TaskModel, task_id)
        return self._task_to_entity(model) if model else None

    def has_pending_bid(self, task_id: int, helper_id: int) -> bool:
        return (
            self.session.query(BidModel.id)
            .filter(
                BidModel.task_id == task_id,
                BidModel.helper_id == helper_id,
                BidModel.status == BID_STATUS_PENDING,
            )
            .first()
            is not None
        )

    def create_task(self, task: Task) -> Task:
        model = TaskModel(
            title=task.title,
            status=task.status,
            poster_id=task.poster_id,
            assigned_helper_id=task.assigned_helper_id,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._task_to_entity(model)

    def create_bid(self, bid: Bid) -> Bid:
        model = BidModel(
            task_id=bid.task_id,
            helper_id=bid.helper_id,
            amount=bid.amount,
            status=bid.status,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return Bid(
            id=model.id,
            task_id=model.task_id,
            helper_id=model.helper_id,
            amount=model.amount,
            status=model.status,
            created_at=from_storage(model.created_at),
        )

    @staticmethod
    def _task_to_entity(model: TaskModel) -> Task:
        return Task(
            id=model.id,
            title=model.title,
            status=model.status,
            poster_id=model.poster_id,
            assigned_helper_id=model.assigned_helper_id,
            created_at=from_storage(model.created_at),
        )


__all__ = ["TaskRepository"]
