"""Seed a poster, a helper, a task with a pending bid and the chat thread between them."""

from __future__ import annotations

import argparse
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from jiffyjobs.application.use_cases.chat import get_or_create_thread
from jiffyjobs.domain.entities import Bid, Task, User
from jiffyjobs.infrastructure.database import SessionLocal, initialize_database
from jiffyjobs.infrastructure.repositories import TaskRepository, UserRepository
from jiffyjobs.infrastructure.security import create_user_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the seed data."""

    parser = argparse.ArgumentParser(
        description="Create demo users, a task and a chat thread for local testing.",
    )
    parser.add_argument("--poster-email", default="poster@example.com")
    parser.add_argument("--helper-email", default="helper@example.com")
    parser.add_argument(
        "--task-title",
        default="Help moving a couch",
        help="Title of the task the chat thread belongs to",
    )
    parser.add_argument(
        "--bid-amount",
        default="40.00",
        help="Amount of the helper's pending bid (default: 40.00)",
    )
    return parser.parse_args()


def _get_or_create_user(repository: UserRepository, email: str, name: str) -> User:
    existing = repository.get_by_email(email)
    if existing is not None:
        return existing
    return repository.create(User(id=None, name=name, email=email))


def main() -> None:
    """Create the seed rows and print an access token for each user."""

    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        users = UserRepository(session)
        poster = _get_or_create_user(users, args.poster_email, "Demo Poster")
        helper = _get_or_create_user(users, args.helper_email, "Demo Helper")

        tasks = TaskRepository(session)
        task = tasks.create_task(Task(id=None, title=args.task_title, status="OPEN", poster_id=poster.id))
        tasks.create_bid(Bid(id=None, task_id=task.id, helper_id=helper.id, amount=Decimal(args.bid_amount)))

        thread, _ = get_or_create_thread(
            session, None, user_id=poster.id, task_id=task.id, helper_id=helper.id
        )
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Could not seed chat data: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Database error while seeding chat data: {exc}") from exc
    else:
        print(
            "Chat seeded:\n"
            f"  Task: {task.id} ({task.title})\n"
            f"  Thread: {thread.id}\n"
            f"  Poster {poster.id} token: {create_user_token(poster.id, poster.email)}\n"
            f"  Helper {helper.id} token: {create_user_token(helper.id, helper.email)}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
