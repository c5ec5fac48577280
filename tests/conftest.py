"""Pytest configuration and shared fixtures."""
import asyncio
import json
from collections.abc import Sequence

import pytest

from pragent.chat import ChatError, ChatReply, ChatTransport
from pragent.memory import ConversationContext, create_conversation_store


def sse(payload: dict) -> bytes:
    """Encode one event-stream record."""
    return f"data: {json.dumps(payload)}\n\n".encode()


@pytest.fixture
def encode_stream():
    """Return a function encoding payloads as one event-stream body."""
    def _encode(*payloads: dict) -> bytes:
        return b"".join(sse(payload) for payload in payloads)
    return _encode


@pytest.fixture
def complete_payload():
    """Return a complete event payload shaped like the chatbot's."""
    return {
        "type": "complete",
        "session_id": "s1",
        "message": {
            "content": "Here is a pitch for your launch.",
            "timestamp": "2026-03-02T10:15:00Z",
        },
        "actions_executed": [
            {"tool": "search_journalists", "args": {"beat": "tech"}},
        ],
        "suggestions": [
            {
                "title": "Find journalists",
                "description": "Match the pitch to tech reporters",
                "action": "Find tech journalists for this pitch",
                "priority": "urgent",
            },
        ],
        "next_steps": [{"title": "Schedule outreach"}, "Review the draft"],
        "tips": ["Lead with the customer story"],
        "performance_info": {"credits_used": 2, "quality_scores": [8.5]},
    }


class ScriptedTransport(ChatTransport):
    """ChatTransport returning scripted replies and recording every call.

    Script entries are ChatReply payload dicts or ChatError instances.
    When ``gate`` is set, each send waits for it before answering.
    """

    def __init__(self, script: Sequence[dict | ChatError] = ()) -> None:
        self.script = list(script)
        self.calls: list[dict] = []
        self.gate: asyncio.Event | None = None
        self.closed = False

    async def send_message(
        self,
        message: str,
        session_id: str | None = None,
        history: Sequence[dict[str, str]] = (),
        token: str | None = None,
    ) -> ChatReply:
        self.calls.append({
            "message": message,
            "session_id": session_id,
            "history": list(history),
            "token": token,
        })
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.script.pop(0)
        if isinstance(outcome, ChatError):
            raise outcome
        return ChatReply.model_validate(outcome)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def scripted_transport():
    """Return a factory for ScriptedTransport."""
    return ScriptedTransport


@pytest.fixture
def memory_store():
    """Return an in-memory conversation store."""
    return create_conversation_store("memory")


@pytest.fixture
async def context(memory_store):
    """Return a loaded conversation context over the in-memory store."""
    ctx = ConversationContext(memory_store)
    await ctx.load()
    return ctx
