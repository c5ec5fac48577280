"""SQLite conversation store.

Provides persistent conversation storage using a SQLite database file.
Uses aiosqlite for async access; every write is a single transaction.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from .base import ConversationStore


class SQLiteConversationStore(ConversationStore):
    """SQLite-backed conversation store.

    Stores key/value pairs in one table so that the conversation log and
    session id survive restarts and are always replaced together.
    """

    def __init__(self, path: str | Path = "./conversation_memory.db"):
        self._db_path = Path(path).expanduser()
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open the database and create the schema if needed."""
        if self._connection is not None:
            return
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self._db_path)
        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS local_storage (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        await self._connection.commit()

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    def _require_connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise RuntimeError("SQLiteConversationStore is not connected. Call connect() first.")
        return self._connection

    async def read(self, keys: Iterable[str]) -> dict[str, str | None]:
        connection = self._require_connection()
        wanted = list(keys)
        result: dict[str, str | None] = dict.fromkeys(wanted)
        if not wanted:
            return result

        placeholders = ", ".join("?" for _ in wanted)
        async with connection.execute(
            f"SELECT key, value FROM local_storage WHERE key IN ({placeholders})",
            wanted,
        ) as cursor:
            rows = await cursor.fetchall()

        for key, value in rows:
            result[key] = value
        return result

    async def write(self, values: Mapping[str, str | None]) -> None:
        connection = self._require_connection()
        now = datetime.now(timezone.utc).isoformat()
        try:
            for key, value in values.items():
                if value is None:
                    await connection.execute(
                        "DELETE FROM local_storage WHERE key = ?",
                        (key,),
                    )
                else:
                    await connection.execute("""
                        INSERT INTO local_storage (key, value, updated_at)
                        VALUES (?, ?, ?)
                        ON CONFLICT(key) DO UPDATE SET
                            value = excluded.value,
                            updated_at = excluded.updated_at
                    """, (key, value, now))
            await connection.commit()
        except BaseException:
            await connection.rollback()
            raise

    @property
    def backend_type(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> Path:
        return self._db_path
