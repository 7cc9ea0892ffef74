"""Endpoints for reading notifications and moving them to the read state."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from jiffyjobs.application.use_cases.notifications import (
    list_notifications as list_notifications_uc,
    mark_all_notifications_read as mark_all_notifications_read_uc,
    mark_notification_read as mark_notification_read_uc,
)
from jiffyjobs.domain.entities import User
from jiffyjobs.domain.errors import ChatError
from jiffyjobs.infrastructure.database import get_db
from jiffyjobs.infrastructure.realtime import RealtimePublisher
from jiffyjobs.interfaces.api.dependencies import (
    get_current_active_user,
    get_realtime_publisher,
)
from jiffyjobs.interfaces.api.errors import to_http_exception
from jiffyjobs.interfaces.api.schemas import (
    MarkAllReadResponse,
    NotificationPageRead,
    NotificationRead,
    PaginationRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationPageRead)
def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationPageRead:
    """Return the most recent notifications for the authenticated user."""

    result = list_notifications_uc(
        db,
        user_id=current_user.id,
        page=page,
        limit=limit,
        unread_only=unread_only,
    )
    return NotificationPageRead(
        notifications=[NotificationRead.from_entity(item) for item in result.items],
        pagination=PaginationRead.from_page(result),
        unread_count=result.unread_count or 0,
    )


@router.patch("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    publisher: RealtimePublisher = Depends(get_realtime_publisher),
) -> MarkAllReadResponse:
    count = mark_all_notifications_read_uc(db, publisher, user_id=current_user.id)
    return MarkAllReadResponse(count=count)


@router.patch("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    publisher: RealtimePublisher = Depends(get_realtime_publisher),
) -> NotificationRead:
    try:
        notification = mark_notification_read_uc(
            db,
            publisher,
            user_id=current_user.id,
            notification_id=notification_id,
        )
    except ChatError as exc:
        raise to_http_exception(exc) from exc
    return NotificationRead.from_entity(notification)
