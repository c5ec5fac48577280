"""Unit tests for chat models and display formatting."""
import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from pragent.chat import ChatMessage, ChatReply, Suggestion, SuggestionBundle, ToolInvocation
from pragent.ui.formatting import (
    format_actions,
    format_badge,
    format_hints,
    format_time,
    last_assistant_message,
    preview_prompt,
    suggestion_actions,
)


class TestSuggestion:
    """Tests for Suggestion."""

    @pytest.mark.parametrize("priority", ["high", "medium", "low"])
    def test_known_priority_kept(self, priority: str):
        """Test that recognized priorities are kept."""
        assert Suggestion(title="t", priority=priority).priority == priority

    @given(st.text().filter(lambda value: value not in ("high", "medium", "low")))
    def test_unknown_priority_normalized(self, priority: str):
        """Property test: any other priority becomes medium."""
        assert Suggestion(title="t", priority=priority).priority == "medium"


class TestChatMessage:
    """Tests for ChatMessage."""

    def test_defaults(self):
        """Test id, timestamp and flags of a new message."""
        message = ChatMessage(role="user", content="Hi")

        assert len(message.id) == 32
        assert message.timestamp
        assert message.actions is None
        assert message.error is False

    def test_immutable(self):
        """Test that messages cannot be changed after creation."""
        message = ChatMessage(role="user", content="Hi")
        with pytest.raises(ValidationError):
            message.content = "changed"  # type: ignore

    def test_invalid_role(self):
        """Test that only user and assistant roles exist."""
        with pytest.raises(ValidationError):
            ChatMessage(role="system", content="Hi")

    def test_window_entry(self):
        """Test the projection sent upstream."""
        message = ChatMessage(role="assistant", content="Hello", timestamp="2026-03-02T10:00:00Z")
        assert message.to_window_entry() == {
            "role": "assistant",
            "content": "Hello",
            "timestamp": "2026-03-02T10:00:00Z",
        }


class TestChatReply:
    """Tests for ChatReply."""

    def test_minimal_reply(self):
        """Test a complete event carrying only a message."""
        reply = ChatReply.model_validate({"type": "complete", "message": {"content": "Hi"}})

        assert reply.actions_executed == []
        assert reply.session_id is None
        message = reply.to_message()
        assert message.role == "assistant"
        assert message.actions == ()
        assert message.metadata.credits_used is None

    def test_null_lists_become_empty(self):
        """Test that explicit nulls are treated as empty lists."""
        reply = ChatReply.model_validate({
            "message": {"content": "Hi"},
            "actions_executed": None,
            "suggestions": None,
            "next_steps": None,
            "tips": None,
        })
        assert reply.suggestions == []
        assert reply.next_steps == []

    def test_to_message_maps_everything(self, complete_payload):
        """Test the assistant message built from a full reply."""
        message = ChatReply.model_validate(complete_payload).to_message()

        assert message.timestamp == "2026-03-02T10:15:00Z"
        assert message.actions == (
            ToolInvocation(tool="search_journalists", arguments={"beat": "tech"}),
        )
        assert message.metadata.suggestions[0].priority == "medium"
        assert message.metadata.next_steps == ("Schedule outreach", "Review the draft")
        assert message.metadata.tips == ("Lead with the customer story",)
        assert message.metadata.credits_used == 2
        assert message.metadata.quality_scores == (8.5,)

    def test_named_quality_scores(self):
        """Test that named scores are reduced to their values."""
        reply = ChatReply.model_validate({
            "message": {"content": "Hi"},
            "performance_info": {"quality_scores": {"relevance": 9, "tone": 7}},
        })
        assert reply.to_message().metadata.quality_scores == (9, 7)

    def test_null_fields_tolerated(self):
        """Test that null tool args and suggestion fields fall back to blanks."""
        reply = ChatReply.model_validate({
            "message": {"content": "Here is a pitch..."},
            "actions_executed": [{"tool": "generate_pitch", "args": None}],
            "suggestions": [{"title": None, "description": None, "action": "Find journalists"}],
            "next_steps": [{"title": None}, "Review the draft"],
        })
        message = reply.to_message()

        assert message.actions == (ToolInvocation(tool="generate_pitch"),)
        assert message.metadata.suggestions[0].title == ""
        assert message.metadata.suggestions[0].description == ""
        assert message.metadata.next_steps == ("Review the draft",)

    def test_message_required(self):
        """Test that a reply without a message is invalid."""
        with pytest.raises(ValidationError):
            ChatReply.model_validate({"type": "complete"})


class TestFormatting:
    """Tests for display helpers."""

    def test_preview_prompt(self):
        """Test shortening a quick prompt."""
        assert preview_prompt("Generate a PR pitch for our launch") == "Generate a PR pitch..."
        assert preview_prompt("Short one") == "Short one"

    @pytest.mark.parametrize("count, expected", [(1, "1"), (99, "99"), (100, "99+")])
    def test_format_badge(self, count: int, expected: str):
        """Test the unread counter text."""
        assert format_badge(count) == expected

    def test_format_time_passthrough(self):
        """Test that unparsable timestamps are shown as-is."""
        assert format_time("yesterday") == "yesterday"

    def test_format_actions(self):
        """Test the tool action summary."""
        message = ChatMessage(
            role="assistant",
            content="Sent",
            actions=(ToolInvocation(tool="send_email"), ToolInvocation(tool="log_activity")),
        )
        assert format_actions(message) == "Ran 2 action(s): send_email, log_activity"
        assert format_actions(ChatMessage(role="assistant", content="x")) is None

    def test_format_hints(self):
        """Test tips and usage hints."""
        bundle = SuggestionBundle(tips=("Be brief",), credits_used=1.5, quality_scores=(8,))
        hints = format_hints(bundle)

        assert "- Be brief" in hints
        assert "Credits used: 1.5" in hints
        assert "Quality: 8/10" in hints
        assert format_hints(None) == ""

    def test_suggestion_actions(self):
        """Test that suggestions come before next steps."""
        message = ChatMessage(
            role="assistant",
            content="x",
            metadata=SuggestionBundle(
                suggestions=(Suggestion(title="Find journalists", action="Find tech journalists"),),
                next_steps=("Schedule outreach",),
            ),
        )
        assert suggestion_actions(message) == [
            ("Find journalists", "Find tech journalists"),
            ("Schedule outreach", "Schedule outreach"),
        ]
        assert suggestion_actions(None) == []

    def test_suggestion_actions_limits(self):
        """Test that each group is cut to its own limit."""
        message = ChatMessage(
            role="assistant",
            content="x",
            metadata=SuggestionBundle(
                suggestions=tuple(Suggestion(title=f"s{index}") for index in range(5)),
                next_steps=("n0", "n1", "n2"),
            ),
        )
        labels = [label for label, _ in suggestion_actions(message, 3, 2)]

        assert labels == ["s0", "s1", "s2", "n0", "n1"]
        assert len(suggestion_actions(message)) == 8

    def test_last_assistant_message(self):
        """Test finding the latest assistant message."""
        first = ChatMessage(role="assistant", content="a")
        messages = (first, ChatMessage(role="user", content="b"))
        assert last_assistant_message(messages) is first
        assert last_assistant_message(()) is None
