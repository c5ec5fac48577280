"""Failure taxonomy for chat turns.

Decode anomalies never surface here; the stream decoder absorbs them.
"""


class ChatError(Exception):
    """Base class for failures the session controller turns into a chat message."""

    def __init__(self, message: str, server_detail: str | None = None) -> None:
        super().__init__(message)
        self.server_detail = server_detail


class TransportError(ChatError):
    """Network or connection failure. Never retried automatically."""


class ProtocolViolation(ChatError):
    """Upstream answered, but not with a usable chat stream.

    Raised for a non-2xx status before streaming starts, a stream that ends
    without a complete event, or a complete event that cannot be read.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        server_detail: str | None = None,
    ) -> None:
        super().__init__(message, server_detail=server_detail)
        self.status_code = status_code
