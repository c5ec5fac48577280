"""Data models for the chat session surfaces."""

from enum import Enum


class SessionState(str, Enum):
    """States of a chat session as seen by the user."""

    IDLE = "idle"
    SENDING = "sending"
    ERROR = "error"
