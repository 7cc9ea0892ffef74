"""SQLAlchemy models for tasks and the bids placed on them."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from jiffyjobs.domain.entities import BID_STATUS_PENDING
from jiffyjobs.infrastructure.database import Base
from jiffyjobs.utils import utc_now_naive


class TaskModel(Base):
    """Database representation of a posted task."""

    __tablename__ = "task"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    status = Column(String(30), nullable=False, default="OPEN")
    poster_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    assigned_helper_id = Column(Integer, ForeignKey("user.id"), nullable=True, index=True)
    created_at = Column(DateTime(), nullable=False, default=utc_now_naive)

    bids = relationship("BidModel", back_populates="task", cascade="all, delete-orphan")


class BidModel(Base):
    """Database representation of a helper's bid on a task."""

    __tablename__ = "bid"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("task.id"), nullable=False, index=True)
    helper_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=BID_STATUS_PENDING)
    created_at = Column(DateTime(), nullable=False, default=utc_now_naive)

    task = relationship("TaskModel", back_populates="bids")


__all__ = ["BidModel", "TaskModel"]
