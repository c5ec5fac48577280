"""Chat session controller shared by every presentation surface.

Hides the protocol and persistence semantics of a chat session so that the
docked widget, the full-page assistant and the console renderer cannot drift
apart: they all drive the same controller over the same conversation context.
"""

import logging
from collections.abc import Callable

from ..chat import ChatError, ChatMessage, ChatTransport
from ..memory import ConversationContext
from .models import SessionState

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = (
    "Sorry, I encountered an error processing your request. Please try again."
)

CredentialProvider = Callable[[], str | None]


class SessionListener:
    """Receives session updates. Override only the hooks you need."""

    def on_state_changed(self, state: SessionState) -> None:
        pass

    def on_message(self, message: ChatMessage) -> None:
        pass

    def on_cleared(self) -> None:
        pass

    def on_notice(self, text: str, severity: str = "information") -> None:
        pass


class ChatSessionController:
    """State machine Idle -> Sending -> (Idle | Error) around one conversation.

    Only one send can be in flight; submissions arriving meanwhile are
    rejected, never queued or merged.

    Example:
        controller = ChatSessionController(transport, context, credentials=lambda: token)
        controller.add_listener(renderer)
        await controller.submit("Generate a PR pitch for our launch")
    """

    def __init__(
        self,
        transport: ChatTransport,
        context: ConversationContext,
        credentials: CredentialProvider | None = None,
        contextual_prompts: list[str] | None = None,
    ) -> None:
        self._transport = transport
        self._context = context
        self._credentials = credentials
        self._state = SessionState.IDLE
        self._listeners: list[SessionListener] = []
        self.contextual_prompts: list[str] = list(contextual_prompts or [])

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_sending(self) -> bool:
        return self._state is SessionState.SENDING

    @property
    def context(self) -> ConversationContext:
        return self._context

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return self._context.messages

    @property
    def session_id(self) -> str | None:
        return self._context.session_id

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SessionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def submit(self, text: str) -> ChatMessage | None:
        """Send ``text`` as a new user turn.

        Returns the assistant message appended for this turn (genuine or a
        synthesized error), or None when the submission was rejected.
        """
        message = text.strip() if text else ""
        if not message:
            return None
        if self.is_sending:
            logger.debug("Rejected submission while a send is in flight")
            return None

        self._set_state(SessionState.SENDING)
        try:
            history = self._context.window()
            user_message = ChatMessage(role="user", content=message)
            await self._context.append(user_message)
            self._emit_message(user_message)

            token = self._credentials() if self._credentials else None
            try:
                reply = await self._transport.send_message(
                    message,
                    session_id=self._context.session_id,
                    history=history,
                    token=token,
                )
            except ChatError as e:
                logger.warning("Chat turn failed: %s", e)
                return await self._append_error(e)

            await self._context.adopt_session(reply.session_id)
            assistant_message = reply.to_message()
            await self._context.append(assistant_message)
            self._emit_message(assistant_message)

            tool_count = len(reply.actions_executed)
            if tool_count:
                plural = "s" if tool_count > 1 else ""
                self._emit_notice(f"Ran {tool_count} tool action{plural}", "information")

            self._set_state(SessionState.IDLE)
            return assistant_message
        except BaseException:
            if self.is_sending:
                self._set_state(SessionState.ERROR)
            raise

    async def activate(self, action: str) -> ChatMessage | None:
        """Activate a suggestion, next step or quick prompt."""
        return await self.submit(action)

    async def clear(self) -> None:
        """Start a new chat: drop the log and the session id."""
        await self._context.reset()
        for listener in list(self._listeners):
            listener.on_cleared()
        self._emit_notice("Chat cleared", "information")
        if not self.is_sending:
            self._set_state(SessionState.IDLE)

    async def _append_error(self, error: ChatError) -> ChatMessage:
        error_message = ChatMessage(
            role="assistant",
            content=error.server_detail or GENERIC_ERROR_MESSAGE,
            error=True,
        )
        await self._context.append(error_message)
        self._emit_message(error_message)
        self._emit_notice("Failed to send message", "error")
        self._set_state(SessionState.ERROR)
        return error_message

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener.on_state_changed(state)

    def _emit_message(self, message: ChatMessage) -> None:
        for listener in list(self._listeners):
            listener.on_message(message)

    def _emit_notice(self, text: str, severity: str) -> None:
        for listener in list(self._listeners):
            listener.on_notice(text, severity)
