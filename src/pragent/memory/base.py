"""Abstract base class for local conversation stores.

This module defines the interface the conversation context persists through.
The abstraction hides:
- Persistence mechanism (in-memory dict, SQLite file)
- How a multi-key write is made atomic
- Connection management

Stores are plain key/value maps of strings, the same shape as browser
local storage. Only the context manager writes to them.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping


class ConversationStore(ABC):
    """Abstract key/value store for the conversation log and session id."""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the store."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the store gracefully."""

    @abstractmethod
    async def read(self, keys: Iterable[str]) -> dict[str, str | None]:
        """Read several keys at once. Missing keys map to None."""

    @abstractmethod
    async def write(self, values: Mapping[str, str | None]) -> None:
        """Write several keys as one unit.

        A None value removes the key. Either every key is written or none is.
        """

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    async def __aenter__(self) -> "ConversationStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()
