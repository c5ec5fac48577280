"""Provider factory functions for CLI.

Centralizes creation of the store, transport and controller from environment
variables. Hides configuration details from command implementations.
"""

import os
from typing import Any

from rich.console import Console

from ..api import DashboardApiClient
from ..chat import ChatTransport, HttpChatTransport
from ..memory import ConversationContext, ConversationStore, create_conversation_store
from ..ui import DEFAULT_CONTEXTUAL_PROMPTS, ChatSessionController, CredentialProvider

DEFAULT_API_URL = "http://localhost:8000/api/proxy"
DEFAULT_MEMORY_PATH = "~/.pragent/chat.db"

# Default console for output
_console = Console()


def get_api_url() -> str:
    """Chat API origin (PRAGENT_API_URL, default: the local relay)."""
    return os.getenv("PRAGENT_API_URL", DEFAULT_API_URL)


def get_store(
    backend: str | None = None,
    path: str | None = None,
    console: Console | None = None,
) -> ConversationStore:
    """Create the conversation store.

    Args:
        backend: "memory" or "sqlite"; falls back to PRAGENT_MEMORY_BACKEND
        path: SQLite file; falls back to PRAGENT_MEMORY_PATH
        console: Optional Rich console for output

    Raises:
        SystemExit: If the backend is unknown

    Environment variables:
        PRAGENT_MEMORY_BACKEND: memory or sqlite (default: sqlite)
        PRAGENT_MEMORY_PATH: SQLite file (default: ~/.pragent/chat.db)
    """
    import typer

    con = console or _console
    backend = (backend or os.getenv("PRAGENT_MEMORY_BACKEND", "sqlite")).lower()
    config: dict[str, Any] = {}
    if backend == "sqlite":
        config["path"] = path or os.getenv("PRAGENT_MEMORY_PATH", DEFAULT_MEMORY_PATH)

    try:
        return create_conversation_store(backend, **config)
    except ValueError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def get_credentials() -> CredentialProvider:
    """Token provider read at call time (PRAGENT_AUTH_TOKEN, optional)."""
    return lambda: os.getenv("PRAGENT_AUTH_TOKEN") or None


def get_transport() -> ChatTransport:
    """Create the chat transport.

    Environment variables:
        PRAGENT_API_URL: Relay or API origin (default: http://localhost:8000/api/proxy)
        PRAGENT_CHAT_TIMEOUT: Seconds before giving up (default: no timeout)
    """
    timeout = os.getenv("PRAGENT_CHAT_TIMEOUT", "").strip()
    return HttpChatTransport(get_api_url(), timeout=float(timeout) if timeout else None)


def get_api_client() -> DashboardApiClient:
    """Create the REST client used for session listings and health checks."""
    return DashboardApiClient(get_api_url(), token=os.getenv("PRAGENT_AUTH_TOKEN") or None)


async def build_controller(
    store: ConversationStore,
    transport: ChatTransport,
) -> ChatSessionController:
    """Connect the store, restore the conversation and wire the controller.

    The caller owns ``store`` and ``transport`` and closes them.
    """
    await store.connect()
    context = ConversationContext(store)
    await context.load()
    return ChatSessionController(
        transport,
        context,
        credentials=get_credentials(),
        contextual_prompts=DEFAULT_CONTEXTUAL_PROMPTS,
    )
