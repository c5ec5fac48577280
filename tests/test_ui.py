"""Tests for the Textual surfaces, driven through Textual's pilot."""
import pytest
from textual.widgets import Button

from pragent.ui import AssistantPageApp, AssistantWidget, AssistantWidgetApp, ChatSessionController
from pragent.ui.widgets import ActionButton, ActionList, ChatHistoryWidget, MessageView


def reply(content: str, session_id: str = "s1", **extra) -> dict:
    return {"message": {"content": content}, "session_id": session_id, **extra}


class TestAssistantWidget:
    """Tests for the docked widget."""

    @pytest.mark.asyncio
    async def test_unread_counted_while_closed(self, context, scripted_transport):
        """Test that replies arriving while closed are counted as unread."""
        controller = ChatSessionController(scripted_transport([reply("One"), reply("Two")]), context)
        app = AssistantWidgetApp(controller, start_open=False)

        async with app.run_test() as pilot:
            widget = app.query_one(AssistantWidget)
            assert not widget.is_open

            await controller.submit("first")
            await controller.submit("second")
            await pilot.pause()

            assert widget.unread_count == 2
            assert str(app.query_one("#launcher", Button).label) == "Assistant (2)"

            widget.open()
            await pilot.pause()

            assert widget.unread_count == 0
            assert str(app.query_one("#launcher", Button).label) == "Assistant"

    @pytest.mark.asyncio
    async def test_history_rendered_when_open(self, context, scripted_transport):
        """Test that messages appear in the widget history."""
        controller = ChatSessionController(scripted_transport([reply("Pitch drafted")]), context)
        app = AssistantWidgetApp(controller, start_open=True)

        async with app.run_test() as pilot:
            await controller.submit("Generate a PR pitch for our launch")
            await pilot.pause()

            views = app.query(MessageView)
            assert [view.message.role for view in views] == ["user", "assistant"]
            assert app.query_one(AssistantWidget).unread_count == 0

    @pytest.mark.asyncio
    async def test_follow_ups_capped(self, context, scripted_transport):
        """Test that the widget shows at most 3 suggestions and 2 next steps."""
        controller = ChatSessionController(scripted_transport([reply(
            "Options below",
            suggestions=[{"title": f"Suggestion {index}"} for index in range(5)],
            next_steps=["Step one", "Step two", "Step three"],
        )]), context)
        app = AssistantWidgetApp(controller, start_open=True)

        async with app.run_test() as pilot:
            await controller.submit("What next?")
            await pilot.pause()

            buttons = app.query_one("#suggestions", ActionList).query(ActionButton)
            assert [button.action_text for button in buttons] == [
                "Suggestion 0", "Suggestion 1", "Suggestion 2", "Step one", "Step two",
            ]


class TestAssistantPageApp:
    """Tests for the full-page assistant."""

    @pytest.mark.asyncio
    async def test_quick_prompts_and_suggestions(self, context, scripted_transport):
        """Test quick prompts before the first reply and suggestions after."""
        transport = scripted_transport([reply(
            "Here you go",
            suggestions=[{"title": "Find journalists", "action": "Find tech journalists"}],
        )])
        controller = ChatSessionController(
            transport,
            context,
            contextual_prompts=["Generate a PR pitch for our latest product launch"],
        )
        app = AssistantPageApp(controller)

        async with app.run_test() as pilot:
            suggestions = app.query_one("#suggestions", ActionList)
            assert suggestions.border_title == "Quick actions"

            await controller.submit("Draft a pitch")
            await pilot.pause()

            assert suggestions.border_title == "Suggestions"
            assert app.query_one(ChatHistoryWidget).get_last_response() == "Here you go"
            assert "s1" in app.sub_title

    @pytest.mark.asyncio
    async def test_new_chat_clears_history(self, context, scripted_transport):
        """Test the new-chat binding."""
        controller = ChatSessionController(scripted_transport([reply("Hello")]), context)
        app = AssistantPageApp(controller)

        async with app.run_test() as pilot:
            await controller.submit("Hi")
            await pilot.pause()

            await pilot.press("ctrl+n")
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert controller.messages == ()
            assert controller.session_id is None
            assert len(app.query(MessageView)) == 0
