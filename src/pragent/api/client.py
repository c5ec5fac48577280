"""REST client for the dashboard API.

The CRUD screens of the dashboard are external collaborators; this client is
the contract they share with the chat core. Only the chatbot session
endpoints are wrapped here, everything else goes through ``request``.
"""

import logging
from typing import Any

import httpx

from ..chat.errors import ChatError, TransportError

logger = logging.getLogger(__name__)

CHATBOT_PREFIX = "/api/v1/chatbot"


class ApiError(ChatError):
    """Non-2xx response from the dashboard API."""

    def __init__(self, status_code: int, server_detail: str | None = None) -> None:
        super().__init__(
            f"API request failed with status {status_code}",
            server_detail=server_detail,
        )
        self.status_code = status_code


class DashboardApiClient:
    """JSON client that carries an explicitly injected bearer token.

    Usage:
        async with DashboardApiClient(base_url, token="...") as api:
            sessions = await api.list_sessions()
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = 30.0,
    ):
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout), follow_redirects=True
        )
        self._base_url = base_url.rstrip("/")
        self._headers = headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (or text).

        Raises:
            ApiError: Non-2xx response
            TransportError: Network failure
        """
        url = f"{self._base_url}/{path.lstrip('/')}"
        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers,
            )
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        logger.debug("%s %s - %d", method, path, response.status_code)

        try:
            body = response.json()
        except ValueError:
            body = response.text or None

        if response.is_error:
            detail = body.get("detail") if isinstance(body, dict) else None
            raise ApiError(response.status_code, detail if isinstance(detail, str) else None)
        return body

    async def list_sessions(self) -> Any:
        return await self.request("GET", f"{CHATBOT_PREFIX}/sessions")

    async def get_session(self, session_id: str) -> Any:
        return await self.request("GET", f"{CHATBOT_PREFIX}/sessions/{session_id}")

    async def delete_session(self, session_id: str) -> Any:
        return await self.request("DELETE", f"{CHATBOT_PREFIX}/sessions/{session_id}")

    async def health(self) -> Any:
        return await self.request("GET", f"{CHATBOT_PREFIX}/health")

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "DashboardApiClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
