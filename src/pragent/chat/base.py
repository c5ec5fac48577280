from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from .models import ChatReply


class ChatTransport(ABC):
    """Abstract base class for chat transports.

    This module hides the design decision of how a chat turn reaches the
    backend. Implementations must handle:
    - Request construction and credential carriage
    - Reading and decoding the response stream
    - Mapping failures onto TransportError / ProtocolViolation

    Each call to send_message is exactly one turn: no retries, no
    fabricated content on failure.

    Supports async context manager protocol for proper resource cleanup:
        async with transport:
            reply = await transport.send_message("Hello")
    """

    @abstractmethod
    async def send_message(
        self,
        message: str,
        session_id: str | None = None,
        history: Sequence[dict[str, str]] = (),
        token: str | None = None,
    ) -> ChatReply:
        """Perform one chat turn.

        Args:
            message: Trimmed, non-empty user text
            session_id: Session held by the conversation, if any
            history: Conversation window (at most the last 10 messages)
            token: Bearer token to attach, if the caller has one

        Returns:
            ChatReply assembled from the stream's complete event

        Raises:
            TransportError: Network failure
            ProtocolViolation: Non-2xx status or no complete event
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "ChatTransport":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        # httpx may close its pool after the loop is gone at interpreter
        # shutdown (encode/httpx#914); only that RuntimeError is dropped.
        try:
            await self.close()
        except RuntimeError as exc:
            if "Event loop is closed" not in str(exc):
                raise
