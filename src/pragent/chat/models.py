"""Data models for chat turns and conversation messages."""

from datetime import datetime, timezone
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

Priority = Literal["high", "medium", "low"]


def utc_timestamp() -> str:
    """Current time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class ToolInvocation(BaseModel):
    """A side-effecting action the backend performed during a turn."""

    model_config = ConfigDict(frozen=True)

    tool: str = Field(description="Name of the backend tool")
    arguments: dict[str, Any] = Field(default_factory=dict)
    status: str = Field(default="completed")


class Suggestion(BaseModel):
    """An advisory follow-up the user can activate as a new message."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    description: str = ""
    action: str = ""
    priority: Priority = "medium"

    @field_validator("title", "description", "action", mode="before")
    @classmethod
    def _none_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value: Any) -> str:
        return value if value in ("high", "medium", "low") else "medium"


class SuggestionBundle(BaseModel):
    """Suggestions and hints attached to an assistant message at creation."""

    model_config = ConfigDict(frozen=True)

    suggestions: tuple[Suggestion, ...] = ()
    next_steps: tuple[str, ...] = ()
    tips: tuple[str, ...] = ()
    credits_used: float | None = None
    quality_scores: tuple[float, ...] | None = None


class ChatMessage(BaseModel):
    """One entry of the conversation log. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    role: Literal["user", "assistant"] = Field(description="Role of the message sender")
    content: str = Field(description="Content of the message")
    timestamp: str = Field(default_factory=utc_timestamp)
    actions: tuple[ToolInvocation, ...] | None = None
    metadata: SuggestionBundle | None = None
    error: bool = Field(default=False, description="Locally synthesized failure message")

    def to_window_entry(self) -> dict[str, str]:
        """Project to the fields sent upstream as conversation context."""
        return {"role": self.role, "content": self.content, "timestamp": self.timestamp}


class ReplyMessage(BaseModel):
    content: str
    timestamp: str | None = None


class ToolCall(BaseModel):
    tool: str
    args: dict[str, Any] = Field(default_factory=dict)

    @field_validator("args", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class PerformanceInfo(BaseModel):
    credits_used: float | None = None
    quality_scores: list[float] | None = None

    @field_validator("quality_scores", mode="before")
    @classmethod
    def _score_values(cls, value: Any) -> Any:
        # Some deployments send named scores.
        if isinstance(value, dict):
            return [score for score in value.values() if isinstance(score, (int, float))]
        return value


class ChatReply(BaseModel):
    """A fully assembled assistant response for one turn.

    Built from the stream's complete event; unknown fields are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    message: ReplyMessage
    actions_executed: list[ToolCall] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)
    performance_info: PerformanceInfo | None = None
    session_id: str | None = None

    @field_validator("actions_executed", "suggestions", "tips", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("next_steps", mode="before")
    @classmethod
    def _step_titles(cls, value: Any) -> list[str]:
        if value is None:
            return []
        steps = []
        for step in value:
            if isinstance(step, dict):
                steps.append(str(step.get("title") or ""))
            else:
                steps.append(str(step))
        return [step for step in steps if step]

    def to_message(self) -> ChatMessage:
        """Build the assistant ChatMessage this reply resolves to."""
        timestamp = self.message.timestamp or utc_timestamp()
        performance = self.performance_info or PerformanceInfo()
        return ChatMessage(
            role="assistant",
            content=self.message.content,
            timestamp=timestamp,
            actions=tuple(
                ToolInvocation(tool=call.tool, arguments=call.args)
                for call in self.actions_executed
            ),
            metadata=SuggestionBundle(
                suggestions=tuple(self.suggestions),
                next_steps=tuple(self.next_steps),
                tips=tuple(self.tips),
                credits_used=performance.credits_used,
                quality_scores=(
                    tuple(performance.quality_scores)
                    if performance.quality_scores is not None
                    else None
                ),
            ),
        )


class ChatRequest(BaseModel):
    """Body of the upstream chat endpoint."""

    message: str
    session_id: str | None = None
    conversation_history: list[dict[str, str]] = Field(default_factory=list)
