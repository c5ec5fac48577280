"""Text formatting utilities for the chat surfaces.

Hides how messages, tool actions and hints are turned into display text.
Shared by the Textual widgets and the console renderer.
"""

from datetime import datetime

from ..chat import ChatMessage, SuggestionBundle
from .config import MESSAGE_TIME_FORMAT, PROMPT_PREVIEW_WORDS, UNREAD_BADGE_MAX


def format_time(timestamp: str) -> str:
    """Render an ISO timestamp as local wall-clock time, or echo it back."""
    try:
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return timestamp
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.strftime(MESSAGE_TIME_FORMAT)


def preview_prompt(prompt: str, words: int = PROMPT_PREVIEW_WORDS) -> str:
    """Shorten a quick prompt to its first few words."""
    parts = prompt.split()
    if len(parts) <= words:
        return prompt
    return " ".join(parts[:words]) + "..."


def format_badge(count: int) -> str:
    """Unread counter text, capped."""
    return f"{UNREAD_BADGE_MAX}+" if count > UNREAD_BADGE_MAX else str(count)


def format_actions(message: ChatMessage) -> str | None:
    """One line summarizing the tool actions of an assistant message."""
    if not message.actions:
        return None
    names = ", ".join(action.tool for action in message.actions)
    return f"Ran {len(message.actions)} action(s): {names}"


def format_hints(bundle: SuggestionBundle | None) -> str:
    """Markdown for tips and usage info; suggestions are rendered as buttons."""
    if bundle is None:
        return ""

    lines: list[str] = []
    if bundle.tips:
        lines.append("**Tips**")
        lines.extend(f"- {tip}" for tip in bundle.tips)
    if bundle.credits_used is not None:
        lines.append(f"_Credits used: {bundle.credits_used:g}_")
    if bundle.quality_scores:
        lines.append(f"_Quality: {bundle.quality_scores[0]:g}/10_")
    return "\n".join(lines)


def suggestion_actions(
    message: ChatMessage | None,
    max_suggestions: int | None = None,
    max_next_steps: int | None = None,
) -> list[tuple[str, str]]:
    """(label, action) pairs a user can activate for an assistant message.

    Suggestions come first, then next steps; each re-enters the chat as a
    new user message. The limits cut each group separately.
    """
    if message is None or message.metadata is None:
        return []
    actions = [
        (suggestion.title or suggestion.action, suggestion.action or suggestion.title)
        for suggestion in message.metadata.suggestions
        if suggestion.action or suggestion.title
    ][:max_suggestions]
    actions.extend((step, step) for step in message.metadata.next_steps[:max_next_steps])
    return actions


def last_assistant_message(messages: tuple[ChatMessage, ...]) -> ChatMessage | None:
    for message in reversed(messages):
        if message.role == "assistant":
            return message
    return None
