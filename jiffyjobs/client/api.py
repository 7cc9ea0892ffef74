"""Async REST client for the chat and notification endpoints."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class ChatApiError(Exception):
    """Raised when the API answers with a non-success status code."""

    def __init__(self, status_code: int, detail: Any) -> None:
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class ChatApiClient:
    """Thin wrapper over ``httpx.AsyncClient`` authenticated with a bearer token."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

    async def __aenter__(self) -> "ChatApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, path, headers=self._headers, **kwargs)
        if response.status_code >= 400:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = response.text
            logger.debug("%s %s failed with %s: %s", method, path, response.status_code, detail)
            raise ChatApiError(response.status_code, detail)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # -- threads --------------------------------------------------------------

    async def open_thread(self, task_id: int, helper_id: int) -> dict[str, Any]:
        return await self._request(
            "POST", "/chat/threads", json={"task_id": task_id, "helper_id": helper_id}
        )

    async def list_threads(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/chat/threads")

    async def get_thread(self, thread_id: int) -> dict[str, Any]:
        return await self._request("GET", f"/chat/threads/{thread_id}")

    async def list_messages(
        self, thread_id: int, *, page: int = 1, limit: int = 50
    ) -> dict[str, Any]:
        return await self._request(
            "GET",
            f"/chat/threads/{thread_id}/messages",
            params={"page": page, "limit": limit},
        )

    async def mark_thread_read(self, thread_id: int) -> int:
        data = await self._request("PATCH", f"/chat/threads/{thread_id}/read")
        return int(data["count"])

    # -- messages -------------------------------------------------------------

    async def send_message(self, thread_id: int, body: str) -> dict[str, Any]:
        return await self._request(
            "POST", "/chat/messages", json={"thread_id": thread_id, "body": body}
        )

    async def delete_message(self, message_id: int) -> None:
        await self._request("DELETE", f"/chat/messages/{message_id}")

    async def report_message(self, message_id: int, reason: str | None = None) -> dict[str, Any]:
        return await self._request(
            "POST", f"/chat/messages/{message_id}/report", json={"reason": reason}
        )

    # -- notifications --------------------------------------------------------

    async def list_notifications(
        self, *, page: int = 1, limit: int = 20, unread_only: bool = False
    ) -> dict[str, Any]:
        params = {"page": page, "limit": limit, "unread_only": str(unread_only).lower()}
        return await self._request("GET", "/notifications/", params=params)

    async def mark_notification_read(self, notification_id: int) -> dict[str, Any]:
        return await self._request("PATCH", f"/notifications/{notification_id}/read")

    async def mark_all_notifications_read(self) -> int:
        data = await self._request("PATCH", "/notifications/read-all")
        return int(data["count"])


__all__ = ["ChatApiClient", "ChatApiError"]
