"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from jiffyjobs.infrastructure.database import Base
from jiffyjobs.utils import utc_now_naive


class UserModel(Base):
    """Database representation of a marketplace user."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(120), nullable=False, unique=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(), nullable=False, default=utc_now_naive)


__all__ = ["UserModel"]
