"""Persistence helpers for user entities."""

from __future__ import annotations

from sqlalchemy.orm import Session

from jiffyjobs.domain.entities import User
from jiffyjobs.infrastructure.models import UserModel
from jiffyjobs.utils import from_storage


class UserRepository:
    """Read and create :class:`User` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(UserModel.email == email.strip().lower())
            .first()
        )
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel(
            name=user.name,
            email=user.email.strip().lower(),
            is_active=user.is_active,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            is_active=bool(model.is_active),
            created_at=from_storage(model.created_at),
        )


__all__ = ["UserRepository"]
