import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from ..stream import CompleteEvent, SessionIdEvent, aiter_events
from .base import ChatTransport
from .errors import ProtocolViolation, TransportError
from .models import ChatReply, ChatRequest

logger = logging.getLogger(__name__)

CHAT_MESSAGE_PATH = "/api/v1/chatbot/message"


class HttpChatTransport(ChatTransport):
    """Chat transport over HTTP with an event-stream response.

    Hidden design decisions:
    - httpx client setup (shared or owned)
    - Where the chat endpoint lives under the base URL
    - How error bodies are mined for a server-supplied detail
    - How the session id is reconciled between stream and complete event
    """

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        **client_kwargs: Any,
    ):
        """Initialize the transport.

        Args:
            base_url: Relay or API origin, e.g. http://localhost:8000/api/proxy
            client: Existing httpx client to use (not closed by this transport)
            timeout: Seconds before giving up; None leaves it to the network stack
            **client_kwargs: Additional kwargs for the owned httpx.AsyncClient
        """
        self._url = base_url.rstrip("/") + CHAT_MESSAGE_PATH
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            **client_kwargs,
        )

    @property
    def url(self) -> str:
        """Full URL of the chat endpoint."""
        return self._url

    def build_request(
        self,
        message: str,
        session_id: str | None,
        history: Sequence[dict[str, str]],
        token: str | None,
    ) -> httpx.Request:
        """Construct the outbound request; the token is injected here only."""
        body = ChatRequest(
            message=message,
            session_id=session_id,
            conversation_history=list(history),
        )
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return self._client.build_request(
            "POST",
            self._url,
            headers=headers,
            content=body.model_dump_json(),
        )

    async def send_message(
        self,
        message: str,
        session_id: str | None = None,
        history: Sequence[dict[str, str]] = (),
        token: str | None = None,
    ) -> ChatReply:
        if not message or message != message.strip():
            raise ValueError("message must be trimmed, non-empty text")

        request = self.build_request(message, session_id, history, token)
        logger.info("Sending chat turn (session=%s, history=%d)", session_id, len(history))

        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise TransportError(f"Chat request failed: {e}") from e

        try:
            if response.is_error:
                await response.aread()
                detail = _error_detail(response)
                raise ProtocolViolation(
                    f"Chat request failed with status {response.status_code}",
                    status_code=response.status_code,
                    server_detail=detail,
                )
            return await self._read_stream(response)
        except httpx.HTTPError as e:
            raise TransportError(f"Chat stream interrupted: {e}") from e
        finally:
            await response.aclose()

    async def _read_stream(self, response: httpx.Response) -> ChatReply:
        stream_session_id: str | None = None
        complete: CompleteEvent | None = None

        async for event in aiter_events(response.aiter_bytes()):
            if isinstance(event, SessionIdEvent):
                stream_session_id = event.session_id
            elif isinstance(event, CompleteEvent):
                complete = event

        if complete is None:
            raise ProtocolViolation(
                "No complete event received from chatbot stream",
                status_code=response.status_code,
            )

        try:
            reply = ChatReply.model_validate(complete.payload)
        except ValidationError as e:
            raise ProtocolViolation(
                f"Malformed complete event: {e.error_count()} validation error(s)",
                status_code=response.status_code,
            ) from e

        if not reply.session_id:
            reply.session_id = stream_session_id

        logger.info(
            "Chat turn complete (session=%s, actions=%d)",
            reply.session_id,
            len(reply.actions_executed),
        )
        return reply

    async def close(self) -> None:
        """Close the owned httpx client."""
        if self._owns_client:
            await self._client.aclose()


def _error_detail(response: httpx.Response) -> str | None:
    """Extract a server-supplied ``detail`` from an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str) and detail:
            return detail
    return None
