"""Use case for opening the chat between a task's poster and one helper."""

from sqlalchemy.orm import Session

from jiffyjobs.domain.entities import ChatThread
from jiffyjobs.domain.errors import NotFoundError, UnauthorizedError, ValidationFailureError
from jiffyjobs.infrastructure.realtime import RealtimePublisher
from jiffyjobs.infrastructure.repositories import ChatThreadRepository, TaskRepository


def get_or_create_thread(
    session: Session,
    publisher: RealtimePublisher | None,
    *,
    user_id: int,
    task_id: int,
    helper_id: int,
) -> tuple[ChatThread, bool]:
    """Return the thread for ``(task_id, helper_id)``, creating it when allowed.

    Chat opens once the helper has a pending bid on the task or has been
    assigned to it. Returns the thread and whether it was created.
    """

    task = TaskRepository(session).get(task_id)
    if task is None:
        raise NotFoundError("Task not found")

    if user_id not in (task.poster_id, helper_id):
        raise UnauthorizedError("You must be the poster or helper for this task")
    if task.poster_id == helper_id:
        raise ValidationFailureError("Cannot create chat thread with yourself")

    threads = ChatThreadRepository(session)
    existing = threads.get_by_task_and_helper(task_id, helper_id)
    if existing is not None:
        return existing, False

    is_assigned = task.assigned_helper_id == helper_id
    if not is_assigned and not TaskRepository(session).has_pending_bid(task_id, helper_id):
        raise ValidationFailureError(
            "Chat can only be started after a bid is placed or helper is assigned"
        )

    thread, created = threads.create(
        task_id=task_id, poster_id=task.poster_id, helper_id=helper_id
    )
    if created and publisher is not None:
        publisher.thread_created(thread)
    return thread, created
