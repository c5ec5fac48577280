"""Textual applications for the assistant.

Orchestrates the UI components around a ChatSessionController:
- AssistantPageApp: the full-page assistant with quick prompts and session info
- AssistantWidgetApp: a dashboard screen hosting the docked AssistantWidget
"""

import asyncio
import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Button, Footer, Header, Static

from .config import DEFAULT_CONTEXTUAL_PROMPTS
from .controller import ChatSessionController
from .formatting import preview_prompt
from .log_handler import PanelLogHandler
from .models import SessionState
from .styles import PAGE_CSS, WIDGET_CSS
from .themes import NEWSROOM_DARK
from .widgets import ActionList, AssistantWidget, ChatPane, LogPanel, SurfaceBridge

PACKAGE_LOGGER = "pragent"


class AssistantPageApp(App):
    """Full-page PR assistant."""

    CSS = PAGE_CSS
    TITLE = "PR Assistant"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", priority=True),
        Binding("ctrl+n", "new_chat", "New Chat", priority=True),
        Binding("ctrl+r", "copy_last_response", "Copy Response", priority=True),
        Binding("ctrl+d", "toggle_log", "Log", priority=True),
    ]

    def __init__(self, controller: ChatSessionController, log_level: str | None = None) -> None:
        super().__init__()
        self._controller = controller
        self._log_level = log_level
        self._bridge = SurfaceBridge(self)
        self._log_handler: PanelLogHandler | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Vertical(id="sidebar"):
            yield Static("", id="session-info")
            yield Button("New chat", id="new-chat-btn", variant="primary")
            yield ActionList(id="quick-prompts", title="Quick prompts")

        with Vertical(id="main-panel"):
            yield ChatPane(self._controller, id="chat-pane")
            yield LogPanel(id="log-panel", level=self._panel_level())

        yield Footer()

    def _panel_level(self) -> int:
        if self._log_level is None:
            return logging.INFO
        return logging.getLevelName(self._log_level.upper())

    def on_mount(self) -> None:
        self.register_theme(NEWSROOM_DARK)
        self.theme = "newsroom-dark"

        prompts = self._controller.contextual_prompts or DEFAULT_CONTEXTUAL_PROMPTS
        self.query_one("#quick-prompts", ActionList).set_actions(
            [(preview_prompt(prompt), prompt) for prompt in prompts]
        )

        log_panel = self.query_one("#log-panel", LogPanel)
        self._log_handler = PanelLogHandler(log_panel, self, level=log_panel.level)
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.addHandler(self._log_handler)
        package_logger.setLevel(log_panel.level)
        # Records must not fall through to stderr while Textual owns the screen.
        package_logger.propagate = False
        if self._log_level is not None:
            log_panel.toggle()

        self._controller.add_listener(self._bridge)
        self._sync_session_info()
        self.query_one(ChatPane).focus_input()

    def on_unmount(self) -> None:
        self._controller.remove_listener(self._bridge)
        if self._log_handler is not None:
            package_logger = logging.getLogger(PACKAGE_LOGGER)
            package_logger.removeHandler(self._log_handler)
            package_logger.propagate = True
            self._log_handler = None

    def on_action_list_activated(self, event: ActionList.Activated) -> None:
        """Quick prompts in the sidebar send like typed input."""
        self.query_one(ChatPane).send(event.action)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "new-chat-btn":
            self.action_new_chat()

    # Controller events (via SurfaceBridge)

    def show_state(self, state: SessionState) -> None:
        self._sync_session_info()

    def show_message(self, message) -> None:
        self._sync_session_info()

    def show_cleared(self) -> None:
        self._sync_session_info()

    def _sync_session_info(self) -> None:
        session = self._controller.session_id or "new conversation"
        lines = [
            f"Session: {session}",
            f"Messages: {len(self._controller.messages)}",
            f"Status: {self._controller.state.value}",
        ]
        self.query_one("#session-info", Static).update("\n".join(lines))
        self.sub_title = session

    def action_new_chat(self) -> None:
        """Start a new conversation."""
        self.run_worker(self._controller.clear(), group="chat-clear")

    def action_toggle_log(self) -> None:
        """Toggle the log panel visibility."""
        is_visible = self.query_one("#log-panel", LogPanel).toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        response = self.query_one(ChatPane).get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


DASHBOARD_TEXT = """\
[b]Campaign dashboard[/b]

The assistant lives in the corner of every dashboard page.
Press [b]ctrl+a[/b] to open or close it; replies that arrive while it is
closed show up as unread on the launcher.
"""


class AssistantWidgetApp(App):
    """Dashboard screen with the docked assistant widget."""

    CSS = WIDGET_CSS
    TITLE = "PR Dashboard"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", priority=True),
        Binding("ctrl+a", "toggle_assistant", "Assistant", priority=True),
        Binding("ctrl+n", "new_chat", "New Chat", priority=True),
    ]

    def __init__(self, controller: ChatSessionController, start_open: bool = True) -> None:
        super().__init__()
        self._controller = controller
        self._start_open = start_open

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static(DASHBOARD_TEXT, id="dashboard")
        yield AssistantWidget(self._controller, id="assistant", start_open=self._start_open)
        yield Footer()

    def on_mount(self) -> None:
        self.register_theme(NEWSROOM_DARK)
        self.theme = "newsroom-dark"

    def action_toggle_assistant(self) -> None:
        self.query_one(AssistantWidget).toggle()

    def action_new_chat(self) -> None:
        self.run_worker(self._controller.clear(), group="chat-clear")


async def run_page_tui(controller: ChatSessionController, log_level: str | None = None) -> None:
    """Run the full-page assistant.

    Args:
        controller: Session controller with a loaded conversation context
        log_level: Log level for the panel (debug/info/warning/error), None to hide
    """
    app = AssistantPageApp(controller, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass


async def run_widget_tui(controller: ChatSessionController, start_open: bool = True) -> None:
    """Run the dashboard with the docked assistant widget."""
    app = AssistantWidgetApp(controller, start_open=start_open)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
