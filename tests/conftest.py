"""Pytest configuration and fixtures."""

import asyncio
import tempfile
from pathlib import Path

import pytest

from misogi.db.repositories import LocalLogStore
from misogi.exceptions import RemoteStoreError
from misogi.models.log import RemoteLogRow
from misogi.models.session import Session


class FakeRemoteStore:
    """In-memory remote store with last-write-wins upserts."""

    def __init__(self):
        self.rows: dict[tuple[str, str], RemoteLogRow] = {}
        self.upserts: list[RemoteLogRow] = []
        self.queries: list[str] = []
        self.fail_query = False
        self.fail_upsert = False
        self.upsert_delay = 0.0
        # Per-call delays, consumed in call order before upsert_delay applies
        self.upsert_delays: list[float] = []

    def seed(self, user_id: str, date: str, **counts) -> None:
        self.rows[(user_id, date)] = RemoteLogRow(user_id=user_id, date=date, **counts)

    async def query(self, user_id: str) -> list[RemoteLogRow]:
        self.queries.append(user_id)
        if self.fail_query:
            raise RemoteStoreError("network unreachable")
        return [row for (uid, _), row in self.rows.items() if uid == user_id]

    async def upsert(self, row: RemoteLogRow) -> None:
        delay = self.upsert_delays.pop(0) if self.upsert_delays else self.upsert_delay
        if delay:
            await asyncio.sleep(delay)
        if self.fail_upsert:
            raise RemoteStoreError("network unreachable")
        self.upserts.append(row)
        self.rows[(row.user_id, row.date)] = row


class FakeAuthProvider:
    """Redirect-style auth: sign_in returns a URL, the callback completes it."""

    def __init__(self, session: Session | None = None):
        self.session = session
        self.listeners = []
        self.sign_in_calls = 0

    async def get_current_session(self) -> Session | None:
        return self.session

    def on_session_change(self, listener) -> None:
        self.listeners.append(listener)

    def emit(self, session: Session | None) -> None:
        self.session = session
        for listener in self.listeners:
            listener(session)

    async def sign_in(self) -> str | None:
        self.sign_in_calls += 1
        return "https://auth.example.com/authorize"

    async def complete_sign_in(self, code: str) -> None:
        self.emit(Session(user_id=f"user-{code}"))

    async def sign_out(self) -> None:
        self.emit(None)


class ThreadedAuthProvider(FakeAuthProvider):
    """Auth that fires its listeners from a worker thread, like a blocking SDK."""

    async def complete_sign_in(self, code: str) -> None:
        await asyncio.to_thread(self.emit, Session(user_id=f"user-{code}"))

    async def sign_out(self) -> None:
        await asyncio.to_thread(self.emit, None)


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def local_store(temp_db_path):
    """A local store backed by a fresh database."""
    return LocalLogStore(temp_db_path)


@pytest.fixture
def broken_local_store():
    """A local store whose database path is a directory, so every call fails."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield LocalLogStore(Path(tmpdir))


@pytest.fixture
def remote_store():
    return FakeRemoteStore()


@pytest.fixture
def signed_in_auth():
    return FakeAuthProvider(Session(user_id="user-1", email="user@example.com"))


@pytest.fixture
def signed_out_auth():
    return FakeAuthProvider()


@pytest.fixture
def threaded_auth():
    return ThreadedAuthProvider()
