"""Conversation context: the authoritative message log and session id.

This module hides:
- Which storage keys hold the conversation and how they are encoded
- How the bounded context window is derived from the log
- How log and session id are kept in step on disk

The log is append-only until ``reset``. Every change is persisted as one
store write covering both keys, so log and session id are never split.
"""

import json
import logging
from collections.abc import Callable

from pydantic import TypeAdapter, ValidationError

from ..chat.models import ChatMessage
from .base import ConversationStore

logger = logging.getLogger(__name__)

SESSION_KEY = "ai_chat_session_id"
MESSAGES_KEY = "ai_chat_messages"
DEFAULT_WINDOW_SIZE = 10

_message_list = TypeAdapter(list[ChatMessage])

Listener = Callable[[], None]


class ConversationContext:
    """Owns the conversation log and the session id for one conversation.

    Usage:
        context = ConversationContext(store)
        await context.load()
        await context.append(ChatMessage(role="user", content="Hi"))
        history = context.window()
    """

    def __init__(self, store: ConversationStore, window_size: int = DEFAULT_WINDOW_SIZE):
        self._store = store
        self._window_size = window_size
        self._messages: list[ChatMessage] = []
        self._session_id: str | None = None
        self._listeners: list[Listener] = []

    @property
    def store(self) -> ConversationStore:
        return self._store

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def session_id(self) -> str | None:
        return self._session_id

    async def load(self) -> None:
        """Restore log and session id from the store.

        Missing or unreadable values are treated as "no prior conversation".
        """
        stored = await self._store.read([SESSION_KEY, MESSAGES_KEY])
        self._session_id = _decode_session(stored.get(SESSION_KEY))
        self._messages = _decode_messages(stored.get(MESSAGES_KEY))
        logger.debug(
            "Loaded %d message(s), session=%s", len(self._messages), self._session_id
        )
        self._notify()

    async def append(self, message: ChatMessage) -> None:
        """Add a message to the end of the log and persist.

        The in-memory log only changes once the store write succeeded.
        """
        messages = [*self._messages, message]
        await self._persist(messages, self._session_id)
        self._messages = messages
        self._notify()

    async def adopt_session(self, session_id: str | None) -> bool:
        """Take ``session_id`` as the conversation's session, if none is held.

        Returns True when the id was adopted. A held session is never
        replaced; only ``reset`` clears it.
        """
        if not session_id or self._session_id is not None:
            return False
        await self._persist(self._messages, session_id)
        self._session_id = session_id
        self._notify()
        return True

    def window(self) -> list[dict[str, str]]:
        """Most recent messages sent upstream as context, oldest first."""
        recent = self._messages[-self._window_size:] if self._window_size > 0 else []
        return [message.to_window_entry() for message in recent]

    async def reset(self) -> None:
        """Empty the log and forget the session id in one step."""
        await self._store.write({SESSION_KEY: None, MESSAGES_KEY: None})
        self._messages = []
        self._session_id = None
        logger.info("Conversation cleared")
        self._notify()

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    async def _persist(self, messages: list[ChatMessage], session_id: str | None) -> None:
        payload = json.dumps([message.model_dump(mode="json") for message in messages])
        await self._store.write({
            MESSAGES_KEY: payload,
            SESSION_KEY: session_id,
        })

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


def _decode_session(raw: str | None) -> str | None:
    if not raw or not raw.strip():
        return None
    return raw


def _decode_messages(raw: str | None) -> list[ChatMessage]:
    if not raw:
        return []
    try:
        return _message_list.validate_json(raw)
    except ValidationError:
        logger.warning("Stored conversation is unreadable; starting empty")
        return []
