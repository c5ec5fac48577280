"""Event types produced by the stream decoder.

These are transient: they describe one record of a chat stream and are
never persisted.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class SessionIdEvent(BaseModel):
    """Announces the backend session that this turn belongs to."""

    model_config = ConfigDict(frozen=True)

    type: Literal["session_id"] = "session_id"
    session_id: str | None = Field(default=None, description="Opaque backend session token")


class CompleteEvent(BaseModel):
    """Terminal record carrying the full assistant response for a turn."""

    model_config = ConfigDict(frozen=True)

    type: Literal["complete"] = "complete"
    payload: dict[str, Any] = Field(description="Raw JSON object of the record")


StreamEvent = SessionIdEvent | CompleteEvent
