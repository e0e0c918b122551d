"""Local persistence of the log document."""

import json
import logging
from pathlib import Path

import aiosqlite

from ..exceptions import LogStoreError
from ..models.log import STORAGE_KEY, LogDocument
from .engine import get_db_path, init_db

logger = logging.getLogger(__name__)


class LocalLogStore:
    """Durable key/value store holding the whole log document under one key.

    The key identifies the application dataset, not a user: anonymous data is
    shared by everyone using the same device.

    Storage failures never escape this class. Reads return ``None`` (or an
    empty document) and writes return ``False`` after logging the error.
    """

    def __init__(self, db_path: Path | None = None, key: str = STORAGE_KEY):
        self.db_path = db_path or get_db_path()
        self.key = key
        self._initialized = False

    async def _ensure_schema(self) -> None:
        if not self._initialized:
            await init_db(self.db_path)
            self._initialized = True

    async def _read(self, key: str) -> str | None:
        try:
            await self._ensure_schema()
            async with aiosqlite.connect(self.db_path) as db:
                cursor = await db.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                )
                row = await cursor.fetchone()
        except (aiosqlite.Error, OSError) as e:
            raise LogStoreError(f"Failed to read {key!r}: {e}") from e
        return row[0] if row else None

    async def _write(self, key: str, value: str) -> None:
        try:
            await self._ensure_schema()
            async with aiosqlite.connect(self.db_path) as db:
                await db.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    (key, value),
                )
                await db.commit()
        except (aiosqlite.Error, OSError) as e:
            raise LogStoreError(f"Failed to write {key!r}: {e}") from e

    async def get(self, key: str) -> str | None:
        """Get a serialized value, or None if absent or unreadable."""
        try:
            return await self._read(key)
        except LogStoreError as e:
            logger.error("Local store read failed: %s", e)
            return None

    async def set(self, key: str, value: str) -> bool:
        """Store a serialized value.

        Returns:
            True if the value was written, False if the write failed
        """
        try:
            await self._write(key, value)
        except LogStoreError as e:
            logger.error("Local store write failed: %s", e)
            return False
        return True

    async def load_document(self) -> LogDocument:
        """Load the stored log document, or an empty one."""
        raw = await self.get(self.key)
        if raw is None:
            return LogDocument()

        try:
            return LogDocument.from_json(raw)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Stored log document is unreadable, starting empty: %s", e)
            return LogDocument()

    async def save_document(self, doc: LogDocument) -> bool:
        """Persist the full log document."""
        return await self.set(self.key, doc.to_json())
