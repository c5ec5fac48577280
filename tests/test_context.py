"""Unit tests for the conversation memory module."""
import json

import pytest

from pragent.chat import ChatMessage
from pragent.memory import (
    MESSAGES_KEY,
    SESSION_KEY,
    ConversationContext,
    ConversationStore,
    create_conversation_store,
)
from pragent.memory.in_memory import InMemoryConversationStore
from pragent.memory.sqlite import SQLiteConversationStore


def user(content: str) -> ChatMessage:
    return ChatMessage(role="user", content=content)


class TestFactory:
    """Tests for create_conversation_store."""

    def test_store_is_abstract(self):
        """Test that ConversationStore cannot be instantiated directly."""
        with pytest.raises(TypeError):
            ConversationStore()  # type: ignore

    def test_memory_backend(self):
        """Test creating the in-memory store."""
        store = create_conversation_store("memory")
        assert isinstance(store, InMemoryConversationStore)
        assert store.backend_type == "memory"

    def test_sqlite_backend(self, tmp_path):
        """Test creating the SQLite store."""
        store = create_conversation_store("sqlite", path=tmp_path / "chat.db")
        assert isinstance(store, SQLiteConversationStore)
        assert store.backend_type == "sqlite"

    def test_unknown_backend(self):
        """Test that unknown backends are rejected."""
        with pytest.raises(ValueError, match="Unsupported memory backend"):
            create_conversation_store("redis")


class TestConversationContext:
    """Tests for ConversationContext over the in-memory store."""

    @pytest.mark.asyncio
    async def test_starts_empty(self, context):
        """Test a context with nothing stored."""
        assert context.messages == ()
        assert context.session_id is None
        assert context.window() == []

    @pytest.mark.asyncio
    async def test_append_persists_both_keys_in_one_write(self, context, memory_store):
        """Test that every append is one write covering log and session."""
        await context.adopt_session("s1")
        writes = memory_store.write_count

        await context.append(user("Hi"))

        assert memory_store.write_count == writes + 1
        stored = memory_store.items
        assert stored[SESSION_KEY] == "s1"
        assert [m["content"] for m in json.loads(stored[MESSAGES_KEY])] == ["Hi"]

    @pytest.mark.asyncio
    async def test_window_is_last_ten(self, context):
        """Test that only the ten most recent messages are sent upstream."""
        for index in range(15):
            await context.append(user(f"m{index}"))

        window = context.window()

        assert len(context.messages) == 15
        assert [entry["content"] for entry in window] == [f"m{i}" for i in range(5, 15)]
        assert set(window[0]) == {"role", "content", "timestamp"}

    @pytest.mark.asyncio
    async def test_first_session_wins(self, context):
        """Test that a held session id is never replaced."""
        assert await context.adopt_session("s1") is True
        assert await context.adopt_session("s2") is False
        assert await context.adopt_session(None) is False
        assert context.session_id == "s1"

    @pytest.mark.asyncio
    async def test_reset_clears_log_and_session(self, context, memory_store):
        """Test that reset drops both keys, and later appends start fresh."""
        await context.adopt_session("s1")
        await context.append(user("old"))

        await context.reset()

        assert context.messages == ()
        assert context.session_id is None
        assert memory_store.items == {}

        await context.append(user("new"))
        assert [m.content for m in context.messages] == ["new"]
        assert SESSION_KEY not in memory_store.items

    @pytest.mark.asyncio
    async def test_listeners_notified(self, context):
        """Test change notification and listener removal."""
        calls = []
        remove = context.add_listener(lambda: calls.append(len(context.messages)))

        await context.append(user("a"))
        remove()
        await context.append(user("b"))

        assert calls == [1]

    @pytest.mark.asyncio
    async def test_failed_write_leaves_state_unchanged(self):
        """Test that the in-memory log only changes after the store write."""
        class FailingStore(InMemoryConversationStore):
            async def write(self, values):
                raise OSError("disk full")

        context = ConversationContext(FailingStore())
        await context.load()

        with pytest.raises(OSError):
            await context.append(user("Hi"))
        assert context.messages == ()


class TestRestore:
    """Tests for restoring persisted conversations."""

    @pytest.mark.asyncio
    async def test_restore_from_stored_values(self):
        """Test loading what a previous run left behind."""
        messages = [
            user("Hi").model_dump(mode="json"),
            ChatMessage(role="assistant", content="Hello!").model_dump(mode="json"),
        ]
        store = InMemoryConversationStore({
            SESSION_KEY: "s7",
            MESSAGES_KEY: json.dumps(messages),
        })

        context = ConversationContext(store)
        await context.load()

        assert context.session_id == "s7"
        assert [m.role for m in context.messages] == ["user", "assistant"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["not json", "{}", '[{"role": "robot"}]', ""])
    async def test_corrupt_messages_treated_as_absent(self, raw: str):
        """Test that an unreadable log starts an empty conversation."""
        store = InMemoryConversationStore({MESSAGES_KEY: raw, SESSION_KEY: "s1"})

        context = ConversationContext(store)
        await context.load()

        assert context.messages == ()
        assert context.session_id == "s1"


class TestSQLiteConversationStore:
    """Tests for the SQLite-backed store."""

    @pytest.mark.asyncio
    async def test_conversation_survives_restart(self, tmp_path):
        """Test that log and session id persist across store instances."""
        path = tmp_path / "nested" / "chat.db"

        async with SQLiteConversationStore(path) as store:
            context = ConversationContext(store)
            await context.load()
            await context.append(user("Generate a PR pitch for our launch"))
            await context.adopt_session("s1")

        async with SQLiteConversationStore(path) as store:
            context = ConversationContext(store)
            await context.load()

            assert context.session_id == "s1"
            assert [m.content for m in context.messages] == ["Generate a PR pitch for our launch"]

    @pytest.mark.asyncio
    async def test_none_deletes_key(self, tmp_path):
        """Test that writing None removes a key."""
        async with SQLiteConversationStore(tmp_path / "chat.db") as store:
            await store.write({SESSION_KEY: "s1", MESSAGES_KEY: "[]"})
            await store.write({SESSION_KEY: None})

            assert await store.read([SESSION_KEY, MESSAGES_KEY]) == {
                SESSION_KEY: None,
                MESSAGES_KEY: "[]",
            }

    @pytest.mark.asyncio
    async def test_requires_connection(self, tmp_path):
        """Test that using the store before connect fails loudly."""
        store = SQLiteConversationStore(tmp_path / "chat.db")
        with pytest.raises(RuntimeError, match="not connected"):
            await store.read([SESSION_KEY])
