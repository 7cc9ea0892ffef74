"""Integration tests for the notification endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from jiffyjobs.application.use_cases.notifications import (
    notify_bid_accepted,
    notify_contract_created,
    notify_helper_assigned,
    notify_review_requested,
    notify_task_updated,
)


def _notify_helper(db_session, participants, count: int) -> None:
    for index in range(count):
        notify_task_updated(
            db_session,
            None,
            user_id=participants.helper.id,
            task_id=participants.task.id,
            task_title=participants.task.title,
            status=f"STEP_{index}",
        )


def _list(client: TestClient, participants, **params):
    response = client.get(
        "/notifications/", params=params, headers=participants.headers(participants.helper)
    )
    assert response.status_code == 200
    return response.json()


def test_new_message_creates_notification_for_receiver(
    client: TestClient, participants, thread_id
) -> None:
    message = client.post(
        "/chat/messages",
        json={"thread_id": thread_id, "body": "Are you free on Saturday?"},
        headers=participants.headers(participants.poster),
    ).json()

    page = _list(client, participants)
    notification = page["notifications"][0]

    assert page["unread_count"] == 1
    assert notification["type"] == "NEW_MESSAGE"
    assert notification["related_thread_id"] == thread_id
    assert notification["metadata"] == {
        "thread_id": thread_id,
        "task_id": participants.task.id,
        "sender_id": participants.poster.id,
        "message_id": message["id"],
    }
    assert "Paula Poster" in notification["message"]


def test_every_notification_type_round_trips(client: TestClient, db_session, participants) -> None:
    helper_id, task = participants.helper.id, participants.task
    notify_bid_accepted(
        db_session, None, helper_id=helper_id, task_id=task.id, task_title=task.title, bid_id=1
    )
    notify_helper_assigned(
        db_session, None, helper_id=helper_id, task_id=task.id, task_title=task.title
    )
    notify_contract_created(
        db_session,
        None,
        user_id=helper_id,
        task_id=task.id,
        task_title=task.title,
        bid_id=1,
        contract_id=4,
    )
    notify_review_requested(
        db_session,
        None,
        user_id=helper_id,
        task_id=task.id,
        task_title=task.title,
        reviewee_id=participants.poster.id,
    )

    page = _list(client, participants)
    by_type = {item["type"]: item for item in page["notifications"]}

    assert set(by_type) == {"BID_ACCEPTED", "HELPER_ASSIGNED", "CONTRACT_CREATED", "REVIEW_REQUESTED"}
    assert by_type["BID_ACCEPTED"]["related_bid_id"] == 1
    assert by_type["CONTRACT_CREATED"]["metadata"]["contract_id"] == 4
    assert by_type["REVIEW_REQUESTED"]["metadata"]["reviewee_id"] == participants.poster.id


def test_unread_count_tracks_new_and_read_all(client: TestClient, db_session, participants) -> None:
    _notify_helper(db_session, participants, 3)
    assert _list(client, participants)["unread_count"] == 3

    response = client.patch("/notifications/read-all", headers=participants.headers(participants.helper))
    assert response.json() == {"count": 3}
    assert _list(client, participants)["unread_count"] == 0

    _notify_helper(db_session, participants, 2)
    page = _list(client, participants, unread_only="true")
    assert page["unread_count"] == 2
    assert len(page["notifications"]) == 2


def test_pagination_is_newest_first(client: TestClient, db_session, participants) -> None:
    _notify_helper(db_session, participants, 5)

    first = _list(client, participants, page=1, limit=2)
    last = _list(client, participants, page=3, limit=2)

    assert [item["metadata"]["status"] for item in first["notifications"]] == ["STEP_4", "STEP_3"]
    assert [item["metadata"]["status"] for item in last["notifications"]] == ["STEP_0"]
    assert first["pagination"]["total_pages"] == 3


def test_mark_single_notification_read(client: TestClient, db_session, participants) -> None:
    _notify_helper(db_session, participants, 1)
    notification_id = _list(client, participants)["notifications"][0]["id"]
    url = f"/notifications/{notification_id}/read"

    first = client.patch(url, headers=participants.headers(participants.helper))
    second = client.patch(url, headers=participants.headers(participants.helper))
    foreign = client.patch(url, headers=participants.headers(participants.poster))
    missing = client.patch("/notifications/999/read", headers=participants.headers(participants.helper))

    assert first.status_code == 200
    assert first.json()["is_read"] is True
    assert second.json()["read_at"] == first.json()["read_at"]
    assert foreign.status_code == 403
    assert missing.status_code == 404
    assert _list(client, participants)["unread_count"] == 0
