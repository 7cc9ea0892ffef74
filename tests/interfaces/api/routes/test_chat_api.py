"""Integration tests for the chat API endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient


def _send(client: TestClient, participants, user, thread_id: int, body: str):
    return client.post(
        "/chat/messages",
        json={"thread_id": thread_id, "body": body},
        headers=participants.headers(user),
    )


def test_thread_is_created_once_per_task_and_helper(client: TestClient, participants) -> None:
    payload = {"task_id": participants.task.id, "helper_id": participants.helper.id}

    first = client.post("/chat/threads", json=payload, headers=participants.headers(participants.poster))
    second = client.post("/chat/threads", json=payload, headers=participants.headers(participants.helper))

    assert first.status_code == 200
    assert first.json()["created"] is True
    assert second.json()["created"] is False
    assert second.json()["thread"]["id"] == first.json()["thread"]["id"]
    assert first.json()["thread"]["task_title"] == "Assemble a bookshelf"


def test_thread_requires_a_bid_or_assignment(client: TestClient, participants) -> None:
    response = client.post(
        "/chat/threads",
        json={"task_id": participants.task.id, "helper_id": participants.outsider.id},
        headers=participants.headers(participants.poster),
    )

    assert response.status_code == 400


def test_outsider_cannot_open_or_read_a_thread(client: TestClient, participants, thread_id) -> None:
    outsider = participants.headers(participants.outsider)

    create = client.post(
        "/chat/threads",
        json={"task_id": participants.task.id, "helper_id": participants.helper.id},
        headers=outsider,
    )
    read = client.get(f"/chat/threads/{thread_id}/messages", headers=outsider)

    assert create.status_code == 403
    assert read.status_code == 403


def test_missing_thread_is_not_found(client: TestClient, participants) -> None:
    response = client.get("/chat/threads/999", headers=participants.headers(participants.poster))

    assert response.status_code == 404


def test_requests_without_token_are_rejected(client: TestClient) -> None:
    assert client.get("/chat/threads").status_code == 401
    bad = client.get("/chat/threads", headers={"Authorization": "Bearer nonsense"})
    assert bad.status_code == 401


def test_send_list_and_mark_read(client: TestClient, participants, thread_id) -> None:
    poster, helper = participants.poster, participants.helper

    for body in ("first", "second", "<b>third</b>"):
        assert _send(client, participants, poster, thread_id, body).status_code == 201

    page = client.get(
        f"/chat/threads/{thread_id}/messages",
        params={"page": 1, "limit": 2},
        headers=participants.headers(helper),
    ).json()
    assert [message["body"] for message in page["messages"]] == ["second", "third"]
    assert page["pagination"]["total"] == 3
    assert page["pagination"]["has_next"] is True

    older = client.get(
        f"/chat/threads/{thread_id}/messages",
        params={"page": 2, "limit": 2},
        headers=participants.headers(helper),
    ).json()
    assert [message["body"] for message in older["messages"]] == ["first"]

    summaries = client.get("/chat/threads", headers=participants.headers(helper)).json()
    assert summaries[0]["unread_count"] == 3
    assert summaries[0]["last_message"]["body"] == "third"

    marked = client.patch(f"/chat/threads/{thread_id}/read", headers=participants.headers(helper))
    assert marked.json() == {"count": 3}
    again = client.patch(f"/chat/threads/{thread_id}/read", headers=participants.headers(helper))
    assert again.json() == {"count": 0}

    summaries = client.get("/chat/threads", headers=participants.headers(helper)).json()
    assert summaries[0]["unread_count"] == 0


def test_blank_message_is_rejected(client: TestClient, participants, thread_id) -> None:
    response = _send(client, participants, participants.poster, thread_id, "   ")

    assert response.status_code == 400


def test_oversized_message_is_rejected(client: TestClient, participants, thread_id) -> None:
    response = _send(client, participants, participants.poster, thread_id, "x" * 5001)

    assert response.status_code == 422


def test_message_rate_limit(client: TestClient, participants, thread_id) -> None:
    statuses = [
        _send(client, participants, participants.poster, thread_id, f"message {index}").status_code
        for index in range(11)
    ]

    assert statuses[:10] == [201] * 10
    assert statuses[10] == 429
    assert _send(client, participants, participants.helper, thread_id, "still fine").status_code == 201


def test_only_sender_can_delete_and_deleted_messages_disappear(
    client: TestClient, participants, thread_id
) -> None:
    message = _send(client, participants, participants.poster, thread_id, "oops").json()

    forbidden = client.delete(
        f"/chat/messages/{message['id']}", headers=participants.headers(participants.helper)
    )
    deleted = client.delete(
        f"/chat/messages/{message['id']}", headers=participants.headers(participants.poster)
    )
    page = client.get(
        f"/chat/threads/{thread_id}/messages", headers=participants.headers(participants.helper)
    ).json()
    summaries = client.get("/chat/threads", headers=participants.headers(participants.helper)).json()

    assert forbidden.status_code == 403
    assert deleted.status_code == 204
    assert page["messages"] == []
    assert summaries[0]["unread_count"] == 0


def test_message_can_be_reported_once(client: TestClient, participants, thread_id) -> None:
    message = _send(client, participants, participants.poster, thread_id, "rude words").json()
    url = f"/chat/messages/{message['id']}/report"

    first = client.post(url, json={"reason": "  abusive "}, headers=participants.headers(participants.helper))
    second = client.post(url, json={"reason": "again"}, headers=participants.headers(participants.helper))
    outsider = client.post(url, json={}, headers=participants.headers(participants.outsider))

    assert first.status_code == 201
    assert first.json()["reason"] == "abusive"
    assert second.status_code == 400
    assert outsider.status_code == 403


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "connections": 0}
