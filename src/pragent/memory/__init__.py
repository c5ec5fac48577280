"""Conversation memory module for pragent.

Owns the conversation log and session id, and persists both locally.
"""

from .base import ConversationStore
from .context import (
    DEFAULT_WINDOW_SIZE,
    MESSAGES_KEY,
    SESSION_KEY,
    ConversationContext,
)
from .factory import create_conversation_store

__all__ = [
    "DEFAULT_WINDOW_SIZE",
    "MESSAGES_KEY",
    "SESSION_KEY",
    "ConversationContext",
    "ConversationStore",
    "create_conversation_store",
]
