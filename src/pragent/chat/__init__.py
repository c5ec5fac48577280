from .base import ChatTransport
from .client import CHAT_MESSAGE_PATH, HttpChatTransport
from .errors import ChatError, ProtocolViolation, TransportError
from .models import (
    ChatMessage,
    ChatReply,
    ChatRequest,
    Suggestion,
    SuggestionBundle,
    ToolInvocation,
)

__all__ = [
    "CHAT_MESSAGE_PATH",
    "ChatError",
    "ChatMessage",
    "ChatReply",
    "ChatRequest",
    "ChatTransport",
    "HttpChatTransport",
    "ProtocolViolation",
    "Suggestion",
    "SuggestionBundle",
    "ToolInvocation",
    "TransportError",
]
