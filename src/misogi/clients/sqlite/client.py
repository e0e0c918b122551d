"""Remote log store backed by a shared SQLite database."""

import logging
from pathlib import Path

import aiosqlite

from ...exceptions import RemoteStoreError
from ...models.log import RemoteLogRow
from ...models.session import Session
from ..base import ListenerRegistry, SessionListener

logger = logging.getLogger(__name__)


class SqliteRemoteLogStore:
    """Remote store for self-hosted setups (e.g. a database on a shared drive).

    Mirrors the hosted ``daily_logs`` table: one row per ``(user_id, date)``,
    and an upsert replaces the whole row.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._initialized = False

    async def init_schema(self) -> None:
        """Create the ``daily_logs`` table if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute("""
                CREATE TABLE IF NOT EXISTS daily_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    pushups INTEGER NOT NULL DEFAULT 0,
                    squats INTEGER NOT NULL DEFAULT 0,
                    pullups INTEGER NOT NULL DEFAULT 0,
                    updated_at TIMESTAMP,
                    UNIQUE (user_id, date)
                )
            """)
            await db.execute("""
                CREATE INDEX IF NOT EXISTS idx_daily_logs_user
                ON daily_logs(user_id)
            """)
            await db.commit()
        self._initialized = True

    async def _ensure_schema(self) -> None:
        if not self._initialized:
            await self.init_schema()

    async def query(self, user_id: str) -> list[RemoteLogRow]:
        """Fetch every row stored for a user."""
        try:
            await self._ensure_schema()
            async with aiosqlite.connect(self.db_path) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(
                    "SELECT * FROM daily_logs WHERE user_id = ?", (user_id,)
                )
                rows = await cursor.fetchall()
        except (aiosqlite.Error, OSError) as e:
            raise RemoteStoreError(f"Query for user {user_id} failed: {e}") from e

        return [RemoteLogRow.from_record(dict(row)) for row in rows]

    async def upsert(self, row: RemoteLogRow) -> None:
        """Insert a row or replace the one stored for ``(user_id, date)``."""
        record = row.to_record()
        try:
            await self._ensure_schema()
            async with aiosqlite.connect(self.db_path) as db:
                await db.execute(
                    """
                    INSERT INTO daily_logs
                    (user_id, date, pushups, squats, pullups, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    ON CONFLICT(user_id, date) DO UPDATE SET
                        pushups = excluded.pushups,
                        squats = excluded.squats,
                        pullups = excluded.pullups,
                        updated_at = excluded.updated_at
                    """,
                    (
                        record["user_id"],
                        record["date"],
                        record["pushups"],
                        record["squats"],
                        record["pullups"],
                        record["updated_at"],
                    ),
                )
                await db.commit()
        except (aiosqlite.Error, OSError) as e:
            raise RemoteStoreError(
                f"Upsert for user {row.user_id} on {row.date} failed: {e}"
            ) from e


class StaticAuthProvider:
    """Auth provider for a single configured user.

    Signing in activates the configured user immediately; there is no
    external flow. Listeners are notified synchronously.
    """

    def __init__(self, user_id: str, signed_in: bool = True):
        self.user_id = user_id
        self._session = Session(user_id=user_id) if signed_in else None
        self._listeners = ListenerRegistry()

    async def get_current_session(self) -> Session | None:
        return self._session

    def on_session_change(self, listener: SessionListener) -> None:
        self._listeners.add(listener)

    async def sign_in(self) -> str | None:
        self._session = Session(user_id=self.user_id)
        logger.info("Signed in as %s", self.user_id)
        self._listeners.notify(self._session)
        return None

    async def complete_sign_in(self, code: str) -> None:
        # No redirect flow; sign_in already activated the session
        return None

    async def sign_out(self) -> None:
        self._session = None
        logger.info("Signed out")
        self._listeners.notify(None)
