"""In-memory conversation store.

Simple dict-based storage for session-only memory.
Data is lost when the application exits.
"""

from collections.abc import Iterable, Mapping

from .base import ConversationStore


class InMemoryConversationStore(ConversationStore):
    """In-memory conversation store (session-only).

    Suitable for single-session use or testing. Pass ``initial`` to seed
    stored values, e.g. to simulate what a previous run left behind.
    """

    def __init__(self, initial: Mapping[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})
        self.write_count = 0

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass

    async def read(self, keys: Iterable[str]) -> dict[str, str | None]:
        return {key: self._items.get(key) for key in keys}

    async def write(self, values: Mapping[str, str | None]) -> None:
        items = dict(self._items)
        for key, value in values.items():
            if value is None:
                items.pop(key, None)
            else:
                items[key] = value
        self._items = items
        self.write_count += 1

    @property
    def items(self) -> dict[str, str]:
        """Snapshot of everything stored."""
        return dict(self._items)

    @property
    def backend_type(self) -> str:
        return "memory"
