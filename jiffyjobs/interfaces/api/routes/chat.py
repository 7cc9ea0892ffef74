"""Endpoints for chat threads and messages."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from jiffyjobs.application.use_cases.chat import (
    MAX_PAGE_SIZE,
    delete_message as delete_message_uc,
    get_or_create_thread as get_or_create_thread_uc,
    get_thread as get_thread_uc,
    list_thread_messages as list_thread_messages_uc,
    list_user_threads as list_user_threads_uc,
    mark_thread_read as mark_thread_read_uc,
    report_message as report_message_uc,
    send_message as send_message_uc,
)
from jiffyjobs.application.use_cases.notifications import NotificationEmailThrottle
from jiffyjobs.domain.entities import ChatThreadSummary, User
from jiffyjobs.domain.errors import ChatError
from jiffyjobs.infrastructure.database import get_db
from jiffyjobs.infrastructure.rate_limit import MessageRateLimiter
from jiffyjobs.infrastructure.realtime import RealtimePublisher
from jiffyjobs.interfaces.api.dependencies import (
    get_current_active_user,
    get_email_throttle,
    get_message_rate_limiter,
    get_realtime_publisher,
)
from jiffyjobs.interfaces.api.errors import to_http_exception
from jiffyjobs.interfaces.api.schemas import (
    ChatMessageCreate,
    ChatMessagePageRead,
    ChatMessageRead,
    ChatThreadCreate,
    ChatThreadRead,
    ChatThreadResponse,
    ChatThreadSummaryRead,
    MarkReadResponse,
    MessageReportCreate,
    MessageReportRead,
    PaginationRead,
)

router = APIRouter(prefix="/chat", tags=["chat"])


def _summary_to_schema(summary: ChatThreadSummary) -> ChatThreadSummaryRead:
    thread = ChatThreadRead.model_validate(summary.thread)
    return ChatThreadSummaryRead(
        **thread.model_dump(),
        last_message=(
            ChatMessageRead.model_validate(summary.last_message)
            if summary.last_message
            else None
        ),
        unread_count=summary.unread_count,
    )


@router.post("/threads", response_model=ChatThreadResponse)
def open_thread(
    payload: ChatThreadCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    publisher: RealtimePublisher = Depends(get_realtime_publisher),
) -> ChatThreadResponse:
    """Return the thread between the task's poster and ``helper_id``, creating it if needed."""

    try:
        thread, created = get_or_create_thread_uc(
            db,
            publisher,
            user_id=current_user.id,
            task_id=payload.task_id,
            helper_id=payload.helper_id,
        )
    except ChatError as exc:
        raise to_http_exception(exc) from exc
    return ChatThreadResponse(thread=ChatThreadRead.model_validate(thread), created=created)


@router.get("/threads", response_model=list[ChatThreadSummaryRead])
def list_threads(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[ChatThreadSummaryRead]:
    """List the authenticated user's threads, most recently active first."""

    summaries = list_user_threads_uc(db, user_id=current_user.id)
    return [_summary_to_schema(summary) for summary in summaries]


@router.get("/threads/{thread_id}", response_model=ChatThreadRead)
def read_thread(
    thread_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ChatThreadRead:
    try:
        thread = get_thread_uc(db, user_id=current_user.id, thread_id=thread_id)
    except ChatError as exc:
        raise to_http_exception(exc) from exc
    return ChatThreadRead.model_validate(thread)


@router.get("/threads/{thread_id}/messages", response_model=ChatMessagePageRead)
def list_messages(
    thread_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ChatMessagePageRead:
    """Return the newest window of messages for ``page``, ordered oldest to newest."""

    try:
        result = list_thread_messages_uc(
            db, user_id=current_user.id, thread_id=thread_id, page=page, limit=limit
        )
    except ChatError as exc:
        raise to_http_exception(exc) from exc
    return ChatMessagePageRead(
        messages=[ChatMessageRead.model_validate(message) for message in result.items],
        pagination=PaginationRead.from_page(result),
    )


@router.patch("/threads/{thread_id}/read", response_model=MarkReadResponse)
def mark_thread_read(
    thread_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    publisher: RealtimePublisher = Depends(get_realtime_publisher),
) -> MarkReadResponse:
    try:
        count = mark_thread_read_uc(
            db, publisher, user_id=current_user.id, thread_id=thread_id
        )
    except ChatError as exc:
        raise to_http_exception(exc) from exc
    return MarkReadResponse(count=count)


@router.post(
    "/messages", response_model=ChatMessageRead, status_code=status.HTTP_201_CREATED
)
def send_message(
    payload: ChatMessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    publisher: RealtimePublisher = Depends(get_realtime_publisher),
    rate_limiter: MessageRateLimiter = Depends(get_message_rate_limiter),
    email_throttle: NotificationEmailThrottle | None = Depends(get_email_throttle),
) -> ChatMessageRead:
    """Store a message; delivery to live clients happens after the commit."""

    try:
        message = send_message_uc(
            db,
            publisher,
            user_id=current_user.id,
            thread_id=payload.thread_id,
            body=payload.body,
            rate_limiter=rate_limiter,
            email_throttle=email_throttle,
        )
    except ChatError as exc:
        raise to_http_exception(exc) from exc
    return ChatMessageRead.model_validate(message)


@router.delete("/messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_message(
    message_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    publisher: RealtimePublisher = Depends(get_realtime_publisher),
) -> None:
    try:
        delete_message_uc(db, publisher, user_id=current_user.id, message_id=message_id)
    except ChatError as exc:
        raise to_http_exception(exc) from exc


@router.post(
    "/messages/{message_id}/report",
    response_model=MessageReportRead,
    status_code=status.HTTP_201_CREATED,
)
def report_message(
    message_id: int,
    payload: MessageReportCreate | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageReportRead:
    try:
        report = report_message_uc(
            db,
            user_id=current_user.id,
            message_id=message_id,
            reason=payload.reason if payload else None,
        )
    except ChatError as exc:
        raise to_http_exception(exc) from exc
    return MessageReportRead.model_validate(report)
