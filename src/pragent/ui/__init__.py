"""Presentation surfaces for the PR assistant.

Every surface drives the same ChatSessionController.

Module structure (each module hides a design decision):
- controller.py: Session state machine (protocol and persistence semantics)
- models.py: Session states
- formatting.py: How messages and suggestions become display text
- widgets.py: Custom Textual widgets (history, suggestions, docked widget)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palette
- log_handler.py: How log records reach the TUI
- app.py: Textual application orchestration
- console.py: Rich console renderer
"""

from .app import AssistantPageApp, AssistantWidgetApp, run_page_tui, run_widget_tui
from .config import DEFAULT_CONTEXTUAL_PROMPTS
from .console import ConsoleChatRenderer, run_console_chat
from .controller import (
    GENERIC_ERROR_MESSAGE,
    ChatSessionController,
    CredentialProvider,
    SessionListener,
)
from .models import SessionState
from .widgets import AssistantWidget, ChatPane

__all__ = [
    "AssistantPageApp",
    "AssistantWidget",
    "AssistantWidgetApp",
    "ChatPane",
    "ChatSessionController",
    "ConsoleChatRenderer",
    "CredentialProvider",
    "DEFAULT_CONTEXTUAL_PROMPTS",
    "GENERIC_ERROR_MESSAGE",
    "SessionListener",
    "SessionState",
    "run_console_chat",
    "run_page_tui",
    "run_widget_tui",
]
