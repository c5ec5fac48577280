"""Custom Textual widgets for the chat surfaces.

Hides widget implementation details:
- Message rendering (markdown, tool actions, hints)
- Input history and submit shortcuts
- Suggestion and quick-prompt buttons
- The docked widget's open/minimized/closed states and unread badge

Both surfaces embed the same ChatPane, which is the only widget that talks
to the ChatSessionController.
"""

import logging
from datetime import datetime
from typing import Any

from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message
from textual.widgets import Button, Markdown, RichLog, Static, TextArea

from ..chat import ChatMessage
from .config import (
    INPUT_HISTORY_MAX_SIZE,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    WELCOME_TEXT,
    WIDGET_MAX_NEXT_STEPS,
    WIDGET_MAX_QUICK_PROMPTS,
    WIDGET_MAX_SUGGESTIONS,
)
from .controller import ChatSessionController, SessionListener
from .formatting import (
    format_actions,
    format_badge,
    format_hints,
    format_time,
    last_assistant_message,
    preview_prompt,
    suggestion_actions,
)
from .models import SessionState


class SurfaceBridge(SessionListener):
    """Forwards controller events to a widget's ``show_*`` methods, when present."""

    def __init__(self, target: Any) -> None:
        self._target = target

    def _call(self, name: str, *args: Any) -> None:
        handler = getattr(self._target, name, None)
        if handler is not None:
            handler(*args)

    def on_state_changed(self, state: SessionState) -> None:
        self._call("show_state", state)

    def on_message(self, message: ChatMessage) -> None:
        self._call("show_message", message)

    def on_cleared(self) -> None:
        self._call("show_cleared")

    def on_notice(self, text: str, severity: str = "information") -> None:
        self._call("show_notice", text, severity)


class MessageView(Vertical):
    """One rendered chat message. Clicking copies its content."""

    def __init__(self, message: ChatMessage, *args, **kwargs) -> None:
        if message.error:
            kind = "error-message"
        else:
            kind = f"{message.role}-message"
        super().__init__(*args, classes=f"chat-message {kind}", **kwargs)
        self.message = message

    def compose(self):
        message = self.message
        who = "You" if message.role == "user" else "Assistant"
        yield Static(Text(f"{who} · {format_time(message.timestamp)}"), classes="message-header")

        if message.role == "assistant" and not message.error:
            yield Markdown(message.content, classes="message-content")
        else:
            yield Static(Text(message.content), classes="message-content")

        actions = format_actions(message)
        if actions:
            yield Static(Text(actions), classes="message-actions")

        hints = format_hints(message.metadata)
        if hints:
            yield Markdown(hints, classes="message-content")

    def on_click(self, event: Click) -> None:
        event.stop()
        self.app.copy_to_clipboard(self.message.content)
        self.app.notify("Copied to clipboard", timeout=2)


class ChatHistoryWidget(VerticalScroll):
    """Scrollable conversation log."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._messages: list[ChatMessage] = []

    def on_mount(self) -> None:
        self._show_welcome()

    def load(self, messages: tuple[ChatMessage, ...]) -> None:
        """Replace the rendered history with ``messages``."""
        self.clear_history()
        for message in messages:
            self.add_message(message)

    def add_message(self, message: ChatMessage) -> None:
        if not self._messages:
            self.remove_children(".welcome")
        self._messages.append(message)
        self.mount(MessageView(message))
        self.border_subtitle = f"{len(self._messages)} messages"
        self.scroll_end(animate=False)

    def clear_history(self) -> None:
        self._messages.clear()
        self.remove_children()
        self.border_subtitle = "Conversation history"
        self._show_welcome()

    def get_last_response(self) -> str | None:
        for message in reversed(self._messages):
            if message.role == "assistant":
                return message.content
        return None

    def _show_welcome(self) -> None:
        if not self._messages:
            self.mount(Static(WELCOME_TEXT, classes="welcome"))


class ActionButton(Button):
    """Button remembering the action text it activates."""

    def __init__(self, label: str, action: str) -> None:
        super().__init__(f"→ {label}")
        self.action_text = action


class ActionList(Vertical):
    """A list of one-line buttons, each activating an action text."""

    class Activated(Message):
        """Posted when the user picks an action."""

        def __init__(self, action: str) -> None:
            super().__init__()
            self.action = action

    def __init__(self, *args, title: str = "", **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.border_title = title

    def set_actions(self, actions: list[tuple[str, str]], title: str | None = None) -> None:
        """Show ``(label, action)`` pairs, replacing the current ones."""
        if title is not None:
            self.border_title = title
        self.remove_children()
        self.mount_all([ActionButton(label, action) for label, action in actions])
        self.set_class(not actions, "empty")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if isinstance(event.button, ActionButton):
            event.stop()
            self.post_message(self.Activated(event.button.action_text))


class ChatInputBar(Horizontal):
    """Prompt editor plus Send button.

    Sent prompts are remembered so that Up on the first line recalls them.
    """

    class Submitted(Message):
        """Posted with the trimmed prompt text."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._sent: list[str] = []
        self._recall: int | None = None

    @property
    def editor(self) -> TextArea:
        return self.query_one("#chat-input", TextArea)

    def compose(self):
        editor = TextArea(id="chat-input", show_line_numbers=False)
        editor.cursor_blink = False
        editor.highlight_cursor_line = False
        yield editor
        send = Button("Send", id="send-btn", variant="success")
        yield send.with_tooltip("Send to the assistant (Ctrl+J)")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id != "send-btn":
            return
        event.stop()
        self._submit()

    def on_key(self, event) -> None:
        # Enter never arrives with modifiers, hence ctrl+j.
        if event.key == "ctrl+j":
            self._submit()
            handled = True
        elif event.key == "up" and self.editor.cursor_location == (0, 0):
            handled = self._recall_previous()
        else:
            handled = False
        if handled:
            event.prevent_default()
            event.stop()

    def _recall_previous(self) -> bool:
        if not self._sent:
            return False
        if self._recall is None:
            self._recall = len(self._sent) - 1
        elif self._recall > 0:
            self._recall -= 1
        self.editor.text = self._sent[self._recall]
        return True

    def _submit(self) -> None:
        prompt = self.editor.text.strip()
        if not prompt:
            return
        if prompt not in self._sent[-1:]:
            self._sent = [*self._sent, prompt][-INPUT_HISTORY_MAX_SIZE:]
        self._recall = None
        self.editor.text = ""
        self.post_message(self.Submitted(prompt))

    def set_busy(self, busy: bool) -> None:
        """Reflect an in-flight send on the Send button."""
        self.set_class(busy, "busy")
        self.query_one("#send-btn", Button).disabled = busy

    def focus_input(self) -> None:
        self.editor.focus()


class ChatPane(Vertical):
    """History, suggestions and input bound to one ChatSessionController.

    Both the docked widget and the full-page app render the conversation
    through this pane, so they cannot diverge on protocol or persistence.
    """

    def __init__(
        self,
        controller: ChatSessionController,
        *args,
        max_quick_prompts: int | None = None,
        max_suggestions: int | None = None,
        max_next_steps: int | None = None,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._controller = controller
        self._max_quick_prompts = max_quick_prompts
        self._max_suggestions = max_suggestions
        self._max_next_steps = max_next_steps
        self._bridge = SurfaceBridge(self)

    @property
    def controller(self) -> ChatSessionController:
        return self._controller

    def compose(self):
        yield ChatHistoryWidget(id="chat-history")
        yield Static("Thinking...", id="thinking")
        yield ActionList(id="suggestions")
        yield ChatInputBar(id="chat-input-bar")

    def on_mount(self) -> None:
        self.query_one(ChatHistoryWidget).load(self._controller.messages)
        self._refresh_actions()
        self._controller.add_listener(self._bridge)
        self.show_state(self._controller.state)

    def on_unmount(self) -> None:
        self._controller.remove_listener(self._bridge)

    def send(self, text: str) -> None:
        """Submit ``text`` through the controller without blocking the UI."""
        if self._controller.is_sending:
            self.notify("Please wait for the current reply", severity="warning", timeout=2)
            return
        self.run_worker(self._controller.submit(text), group="chat-send")

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        event.stop()
        self.send(event.value)

    def on_action_list_activated(self, event: ActionList.Activated) -> None:
        event.stop()
        self.send(event.action)

    def focus_input(self) -> None:
        self.query_one(ChatInputBar).focus_input()

    def get_last_response(self) -> str | None:
        return self.query_one(ChatHistoryWidget).get_last_response()

    # Controller events (via SurfaceBridge)

    def show_state(self, state: SessionState) -> None:
        sending = state is SessionState.SENDING
        self.query_one("#thinking", Static).set_class(sending, "visible")
        self.query_one(ChatInputBar).set_busy(sending)

    def show_message(self, message: ChatMessage) -> None:
        self.query_one(ChatHistoryWidget).add_message(message)
        if message.role == "assistant":
            self._refresh_actions()

    def show_cleared(self) -> None:
        self.query_one(ChatHistoryWidget).clear_history()
        self._refresh_actions()
        self.focus_input()

    def show_notice(self, text: str, severity: str) -> None:
        self.notify(text, severity=severity, timeout=3)

    def _refresh_actions(self) -> None:
        actions_list = self.query_one(ActionList)
        last = last_assistant_message(self._controller.messages)
        if last is not None:
            actions = suggestion_actions(last, self._max_suggestions, self._max_next_steps)
            actions_list.set_actions(actions, title="Suggestions")
            return

        prompts = self._controller.contextual_prompts
        if self._max_quick_prompts is not None:
            prompts = prompts[:self._max_quick_prompts]
        actions_list.set_actions(
            [(preview_prompt(prompt), prompt) for prompt in prompts],
            title="Quick actions",
        )


class AssistantWidget(Vertical):
    """Compact assistant docked beside another app's content.

    Closed, it shows only a launcher button with the unread count.
    Assistant replies arriving while closed or minimized count as unread.
    """

    def __init__(
        self,
        controller: ChatSessionController,
        *args,
        start_open: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._controller = controller
        self._bridge = SurfaceBridge(self)
        self._is_open = start_open
        self._is_minimized = False
        self.unread_count = 0

    @property
    def is_open(self) -> bool:
        return self._is_open

    def compose(self):
        yield Button("Assistant", id="launcher", variant="primary")
        with Horizontal(id="widget-header"):
            yield Static("PR Assistant", id="widget-title")
            yield Static("", id="unread-badge")
            yield Button("New", id="new-chat-btn").with_tooltip("Start a new chat")
            yield Button("_", id="minimize-btn").with_tooltip("Minimize")
            yield Button("x", id="close-btn").with_tooltip("Close")
        yield ChatPane(
            self._controller,
            id="widget-body",
            max_quick_prompts=WIDGET_MAX_QUICK_PROMPTS,
            max_suggestions=WIDGET_MAX_SUGGESTIONS,
            max_next_steps=WIDGET_MAX_NEXT_STEPS,
        )

    def on_mount(self) -> None:
        self._controller.add_listener(self._bridge)
        self._sync_visibility()

    def on_unmount(self) -> None:
        self._controller.remove_listener(self._bridge)

    def open(self) -> None:
        self._is_open = True
        self._is_minimized = False
        self.unread_count = 0
        self._sync_visibility()
        self.query_one(ChatPane).focus_input()

    def close(self) -> None:
        self._is_open = False
        self._sync_visibility()

    def toggle(self) -> None:
        if self._is_open:
            self.close()
        else:
            self.open()

    def toggle_minimized(self) -> None:
        self._is_minimized = not self._is_minimized
        if not self._is_minimized:
            self.unread_count = 0
        self._sync_visibility()

    def send(self, text: str) -> None:
        """Open the widget and send ``text``, like a page-level quick action."""
        if not self._is_open:
            self.open()
        self.query_one(ChatPane).send(text)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "launcher":
            self.open()
        elif button_id == "close-btn":
            self.close()
        elif button_id == "minimize-btn":
            self.toggle_minimized()
        elif button_id == "new-chat-btn":
            self.run_worker(self._controller.clear(), group="chat-clear")
        else:
            return
        event.stop()

    # Controller events (via SurfaceBridge)

    def show_message(self, message: ChatMessage) -> None:
        if message.role == "assistant" and (not self._is_open or self._is_minimized):
            self.unread_count += 1
            self._sync_badge()

    def show_cleared(self) -> None:
        self.unread_count = 0
        self._sync_badge()

    def _sync_visibility(self) -> None:
        self.set_class(not self._is_open, "closed")
        self.set_class(self._is_open and self._is_minimized, "minimized")
        self.query_one("#launcher", Button).display = not self._is_open
        self.query_one("#widget-header").display = self._is_open
        self.query_one(ChatPane).display = self._is_open and not self._is_minimized
        self._sync_badge()

    def _sync_badge(self) -> None:
        badge = format_badge(self.unread_count) if self.unread_count else ""
        self.query_one("#unread-badge", Static).update(badge)
        label = f"Assistant ({badge})" if badge else "Assistant"
        self.query_one("#launcher", Button).label = label


class LogPanel(RichLog):
    """Log panel showing records routed from the logging module.

    Hidden by default; toggled by the app.
    """

    BORDER_TITLE = "Log"

    LEVEL_COLORS = {
        logging.DEBUG: "dim white",
        logging.INFO: "cyan",
        logging.WARNING: "yellow",
        logging.ERROR: "red",
        logging.CRITICAL: "bold red",
    }

    def __init__(self, *args, level: int = logging.INFO, **kwargs) -> None:
        super().__init__(*args, markup=True, highlight=False, auto_scroll=True, wrap=True, **kwargs)
        self.level = level
        self.border_subtitle = f"Level: {logging.getLevelName(level)}"

    def write_record(self, record: logging.LogRecord) -> None:
        if record.levelno < self.level:
            return
        timestamp = datetime.fromtimestamp(record.created).strftime(LOG_TIMESTAMP_FORMAT)
        color = self.LEVEL_COLORS.get(record.levelno, "white")
        message = record.getMessage()
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."
        line = Text.assemble(
            (f"{timestamp} ", "dim"),
            (f"{record.levelname:<7}", color),
            (f" [{record.name}] ", "magenta"),
            message,
        )
        self.write(line)

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        visible = not self.has_class("visible")
        self.set_class(visible, "visible")
        return visible


__all__ = [
    "ActionList",
    "AssistantWidget",
    "ChatHistoryWidget",
    "ChatInputBar",
    "ChatPane",
    "LogPanel",
    "MessageView",
    "SurfaceBridge",
]
