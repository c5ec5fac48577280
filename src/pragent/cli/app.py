"""Main CLI application using Typer."""
import asyncio
import logging

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from ..api import ApiError
from ..chat import ChatError
from ..memory import ConversationContext
from .providers import (
    build_controller,
    get_api_client,
    get_api_url,
    get_store,
    get_transport,
)

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="pragent",
    help="PR campaign assistant: chat relay, terminal chat and TUI surfaces",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

LOG_LEVELS = ("debug", "info", "warning", "error")


def _configure_logging(log_level: str) -> None:
    level = log_level.lower()
    if level not in LOG_LEVELS:
        console.print(f"[red]Error: Unknown log level: {log_level}[/red]")
        raise typer.Exit(code=1)
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


MEMORY_OPTION = typer.Option(
    None,
    "--memory",
    "-m",
    help="Conversation store: 'memory' (session-only) or 'sqlite' (persistent)",
)
MEMORY_PATH_OPTION = typer.Option(
    None,
    "--memory-path",
    help="Path for the SQLite store (only with --memory sqlite)",
)


@app.command()
def relay(
    host: str | None = typer.Option(None, "--host", help="Bind address (default: PRAGENT_RELAY_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default: PRAGENT_RELAY_PORT)"),
    upstream: str | None = typer.Option(
        None, "--upstream", "-u", help="Upstream API origin (default: PRAGENT_UPSTREAM_URL)"
    ),
    log_level: str = typer.Option("info", "--log-level", "-l", help="debug, info, warning or error"),
):
    """Run the same-origin relay in front of the upstream API."""
    import uvicorn

    from ..relay import RelaySettings, create_app

    _configure_logging(log_level)

    settings = RelaySettings.from_env()
    updates = {
        key: value
        for key, value in (("host", host), ("port", port), ("upstream_url", upstream))
        if value is not None
    }
    if updates:
        settings = settings.model_copy(update=updates)

    console.print(f"[bold cyan]Relay[/bold cyan] http://{settings.host}:{settings.port}/api/proxy")
    console.print(f"[dim]Upstream: {settings.upstream_url}[/dim]")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=log_level.lower(),
    )


@app.command()
def chat(
    memory_backend: str | None = MEMORY_OPTION,
    memory_path: str | None = MEMORY_PATH_OPTION,
    log_level: str = typer.Option("warning", "--log-level", "-l", help="debug, info, warning or error"),
):
    """Interactive chat with the PR assistant in the terminal."""
    from ..ui import run_console_chat

    _configure_logging(log_level)

    async def _chat():
        store = get_store(memory_backend, memory_path, console)
        transport = get_transport()
        try:
            controller = await build_controller(store, transport)
            await run_console_chat(controller, console)
        finally:
            await transport.close()
            await store.disconnect()

    try:
        asyncio.run(_chat())
    except KeyboardInterrupt:
        pass


@app.command(name="tui")
def tui_command(
    memory_backend: str | None = MEMORY_OPTION,
    memory_path: str | None = MEMORY_PATH_OPTION,
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error",
    ),
):
    """Launch the full-page assistant."""
    if log_level is not None and log_level.lower() not in LOG_LEVELS:
        console.print(f"[red]Error: Unknown log level: {log_level}[/red]")
        raise typer.Exit(code=1)

    async def _tui():
        from ..ui import run_page_tui

        store = get_store(memory_backend, memory_path, console)
        transport = get_transport()
        try:
            controller = await build_controller(store, transport)
            await run_page_tui(controller, log_level=log_level)
        finally:
            await transport.close()
            await store.disconnect()
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


@app.command()
def widget(
    memory_backend: str | None = MEMORY_OPTION,
    memory_path: str | None = MEMORY_PATH_OPTION,
    closed: bool = typer.Option(False, "--closed", help="Start with the widget closed"),
):
    """Launch a dashboard screen with the docked assistant widget."""
    async def _widget():
        from ..ui import run_widget_tui

        store = get_store(memory_backend, memory_path, console)
        transport = get_transport()
        try:
            controller = await build_controller(store, transport)
            await run_widget_tui(controller, start_open=not closed)
        finally:
            await transport.close()
            await store.disconnect()

    try:
        asyncio.run(_widget())
    except KeyboardInterrupt:
        pass


@app.command()
def history(
    memory_backend: str | None = MEMORY_OPTION,
    memory_path: str | None = MEMORY_PATH_OPTION,
    limit: int = typer.Option(20, "--limit", "-n", help="Show at most this many messages"),
):
    """Show the locally persisted conversation."""
    async def _history():
        store = get_store(memory_backend, memory_path, console)
        try:
            await store.connect()
            context = ConversationContext(store)
            await context.load()

            console.print(f"[bold cyan]Session:[/bold cyan] {context.session_id or '[dim]none[/dim]'}")
            if not context.messages:
                console.print("[dim]No messages stored.[/dim]")
                return

            table = Table(show_header=True, header_style="bold cyan")
            table.add_column("Time", style="dim", width=20)
            table.add_column("Role", width=10)
            table.add_column("Message")

            for message in context.messages[-limit:]:
                role = "[red]error[/red]" if message.error else message.role
                content = message.content.replace("\n", " ")
                if len(content) > 120:
                    content = content[:117] + "..."
                table.add_row(message.timestamp, role, Text(content))

            console.print(table)
            console.print(f"[dim]{len(context.messages)} message(s) stored[/dim]")
        finally:
            await store.disconnect()

    asyncio.run(_history())


@app.command()
def clear(
    memory_backend: str | None = MEMORY_OPTION,
    memory_path: str | None = MEMORY_PATH_OPTION,
):
    """Start a new chat: drop the stored conversation and session id."""
    async def _clear():
        store = get_store(memory_backend, memory_path, console)
        try:
            await store.connect()
            context = ConversationContext(store)
            await context.load()
            count = len(context.messages)
            await context.reset()
            console.print(f"[green]Cleared {count} message(s).[/green]")
        finally:
            await store.disconnect()

    asyncio.run(_clear())


@app.command()
def sessions():
    """List chat sessions known to the server."""
    async def _sessions():
        async with get_api_client() as api:
            try:
                data = await api.list_sessions()
            except ChatError as e:
                console.print(f"[red]Error: {e.server_detail or e}[/red]")
                raise typer.Exit(code=1)

        items = data.get("sessions", []) if isinstance(data, dict) else data
        if not items:
            console.print("[dim]No sessions found.[/dim]")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("ID", style="dim")
        table.add_column("Name")
        table.add_column("Messages", justify="right")
        table.add_column("Last activity")
        table.add_column("Active")

        for item in items:
            table.add_row(
                str(item.get("id", "")),
                str(item.get("session_name", "")),
                str(item.get("total_messages", "")),
                str(item.get("last_activity", "")),
                "yes" if item.get("is_active") else "no",
            )
        console.print(table)

    asyncio.run(_sessions())


@app.command()
def health(
    memory_backend: str | None = MEMORY_OPTION,
    memory_path: str | None = MEMORY_PATH_OPTION,
):
    """Check the chat API and the local conversation store."""
    async def _health():
        all_healthy = True

        console.print(f"[dim]API: {get_api_url()}[/dim]")
        async with get_api_client() as api:
            try:
                await api.health()
                console.print("[green]+[/green] Chatbot API: OK")
            except ApiError as e:
                console.print(f"[red]x[/red] Chatbot API: HTTP {e.status_code} ({e.server_detail or 'no detail'})")
                all_healthy = False
            except ChatError as e:
                console.print(f"[red]x[/red] Chatbot API: FAILED ({e})")
                all_healthy = False

        store = get_store(memory_backend, memory_path, console)
        try:
            await store.connect()
            console.print(f"[green]+[/green] Conversation store ({store.backend_type}): OK")
        except Exception as e:
            console.print(f"[red]x[/red] Conversation store: FAILED ({e})")
            all_healthy = False
        finally:
            await store.disconnect()

        if not all_healthy:
            raise typer.Exit(code=1)

    asyncio.run(_health())


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
