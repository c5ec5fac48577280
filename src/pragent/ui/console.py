"""Rich console renderer for the assistant.

A line-oriented surface over the same ChatSessionController the Textual apps
use. Suggestions are numbered; typing the number activates one.
"""

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.status import Status
from rich.text import Text

from ..chat import ChatMessage
from .controller import ChatSessionController, SessionListener
from .formatting import (
    format_actions,
    format_hints,
    format_time,
    last_assistant_message,
    suggestion_actions,
)
from .models import SessionState

EXIT_COMMANDS = ("exit", "quit", "q", "/quit")
CLEAR_COMMANDS = ("/clear", "/new")

NOTICE_STYLES = {
    "information": "dim",
    "warning": "yellow",
    "error": "red",
}


class ConsoleChatRenderer(SessionListener):
    """Prints controller events to a rich Console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self._status: Status | None = None
        self.actions: list[tuple[str, str]] = []

    def on_state_changed(self, state: SessionState) -> None:
        if state is SessionState.SENDING:
            if self._status is None:
                self._status = self.console.status("[dim]Thinking...[/dim]")
                self._status.start()
        elif self._status is not None:
            self._status.stop()
            self._status = None

    def on_message(self, message: ChatMessage) -> None:
        # The user's own line is already on screen.
        if message.role == "user":
            return
        self.render_message(message)
        self.actions = suggestion_actions(message)
        self.render_actions()

    def on_cleared(self) -> None:
        self.actions = []
        self.console.rule("[dim]New chat[/dim]")

    def on_notice(self, text: str, severity: str = "information") -> None:
        style = NOTICE_STYLES.get(severity, "dim")
        self.console.print(f"[{style}]{text}[/{style}]")

    def render_message(self, message: ChatMessage) -> None:
        title = f"{'You' if message.role == 'user' else 'Assistant'} · {format_time(message.timestamp)}"
        if message.error:
            self.console.print(Panel(Text(message.content), title=title, border_style="red"))
            return
        if message.role == "user":
            self.console.print(Panel(Text(message.content), title=title, border_style="blue"))
            return

        self.console.print(Panel(Markdown(message.content), title=title, border_style="magenta"))
        actions = format_actions(message)
        if actions:
            self.console.print(f"[green]{actions}[/green]")
        hints = format_hints(message.metadata)
        if hints:
            self.console.print(Markdown(hints))

    def render_actions(self) -> None:
        for number, (label, _) in enumerate(self.actions, start=1):
            self.console.print(f"  [cyan]{number}.[/cyan] {label}")

    def render_history(self, messages: tuple[ChatMessage, ...]) -> None:
        for message in messages:
            self.render_message(message)
        self.actions = suggestion_actions(last_assistant_message(messages))
        self.render_actions()

    def resolve(self, line: str) -> str:
        """Map a suggestion number to its action; anything else is sent as typed."""
        choice = line.strip()
        if choice.isdigit() and 1 <= int(choice) <= len(self.actions):
            return self.actions[int(choice) - 1][1]
        return line


async def run_console_chat(
    controller: ChatSessionController, console: Console | None = None
) -> None:
    """Interactive prompt loop until the user quits."""
    renderer = ConsoleChatRenderer(console)
    con = renderer.console
    controller.add_listener(renderer)
    try:
        con.print("[bold cyan]PR Assistant[/bold cyan]")
        con.print("[dim]Type a number to pick a suggestion, /new for a new chat, 'exit' to leave[/dim]\n")

        if controller.messages:
            renderer.render_history(controller.messages)
        elif controller.contextual_prompts:
            renderer.actions = [(prompt, prompt) for prompt in controller.contextual_prompts]
            renderer.render_actions()

        while True:
            try:
                line = con.input("[bold yellow]You:[/bold yellow] ")
            except (KeyboardInterrupt, EOFError):
                con.print("\n[dim]Goodbye![/dim]")
                break

            command = line.strip().lower()
            if not command:
                continue
            if command in EXIT_COMMANDS:
                con.print("[dim]Goodbye![/dim]")
                break
            if command in CLEAR_COMMANDS:
                await controller.clear()
                continue

            await controller.activate(renderer.resolve(line))
    finally:
        controller.remove_listener(renderer)
