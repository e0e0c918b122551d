"""Tests for the Supabase backend using a stand-in client."""

from types import SimpleNamespace

import pytest

from misogi.clients.supabase import SupabaseAuthProvider, SupabaseRemoteLogStore
from misogi.exceptions import RemoteStoreError
from misogi.models.log import RemoteLogRow
from misogi.models.session import Session


class FakeTable:
    """Records the query builder calls made against one table."""

    def __init__(self, client, name):
        self.client = client
        self.name = name

    def select(self, columns):
        self.client.calls.append(("select", self.name, columns))
        return self

    def eq(self, column, value):
        self.client.calls.append(("eq", column, value))
        return self

    def upsert(self, record, on_conflict=None):
        self.client.calls.append(("upsert", record, on_conflict))
        return self

    def execute(self):
        if self.client.error:
            raise self.client.error
        return SimpleNamespace(data=self.client.data)


class FakeAuth:
    def __init__(self):
        self.session = None
        self.callbacks = []
        self.oauth_calls = []
        self.exchanged = []
        self.signed_out = False

    def get_session(self):
        return self.session

    def on_auth_state_change(self, callback):
        self.callbacks.append(callback)

    def sign_in_with_oauth(self, credentials):
        self.oauth_calls.append(credentials)
        return SimpleNamespace(provider=credentials["provider"], url="https://x.supabase.co/authorize")

    def exchange_code_for_session(self, params):
        self.exchanged.append(params)

    def sign_out(self):
        self.signed_out = True


class FakeSupabaseClient:
    def __init__(self, data=None, error=None):
        self.data = data or []
        self.error = error
        self.calls = []
        self.auth = FakeAuth()

    def table(self, name):
        return FakeTable(self, name)


def supabase_session(user_id="u1", email="u1@example.com"):
    return SimpleNamespace(user=SimpleNamespace(id=user_id, email=email))


class TestSupabaseRemoteLogStore:
    """Tests for SupabaseRemoteLogStore."""

    @pytest.mark.asyncio
    async def test_query(self):
        client = FakeSupabaseClient(
            data=[{"user_id": "u1", "date": "2026-01-01", "pushups": 5, "squats": 0, "pullups": 2}]
        )
        rows = await SupabaseRemoteLogStore(client).query("u1")

        assert rows == [RemoteLogRow(user_id="u1", date="2026-01-01", pushups=5, pullups=2)]
        assert ("select", "daily_logs", "*") in client.calls
        assert ("eq", "user_id", "u1") in client.calls

    @pytest.mark.asyncio
    async def test_upsert_uses_unique_key(self):
        client = FakeSupabaseClient()
        row = RemoteLogRow(user_id="u1", date="2026-01-01", squats=3)

        await SupabaseRemoteLogStore(client).upsert(row)

        (call,) = [c for c in client.calls if c[0] == "upsert"]
        assert call[1] == row.to_record()
        assert call[2] == "user_id,date"

    @pytest.mark.asyncio
    async def test_errors_wrapped(self):
        client = FakeSupabaseClient(error=ConnectionError("offline"))
        store = SupabaseRemoteLogStore(client)

        with pytest.raises(RemoteStoreError):
            await store.query("u1")
        with pytest.raises(RemoteStoreError):
            await store.upsert(RemoteLogRow(user_id="u1", date="2026-01-01"))


class TestSupabaseAuthProvider:
    """Tests for SupabaseAuthProvider."""

    @pytest.mark.asyncio
    async def test_current_session(self):
        client = FakeSupabaseClient()
        auth = SupabaseAuthProvider(client)
        assert await auth.get_current_session() is None

        client.auth.session = supabase_session()
        assert await auth.get_current_session() == Session(user_id="u1", email="u1@example.com")

    @pytest.mark.asyncio
    async def test_sign_in_returns_redirect(self):
        client = FakeSupabaseClient()
        auth = SupabaseAuthProvider(client, redirect_url="http://localhost:8000/auth/callback")

        url = await auth.sign_in()

        assert url == "https://x.supabase.co/authorize"
        assert client.auth.oauth_calls == [
            {
                "provider": "google",
                "options": {"redirect_to": "http://localhost:8000/auth/callback"},
            }
        ]

    @pytest.mark.asyncio
    async def test_complete_and_sign_out(self):
        client = FakeSupabaseClient()
        auth = SupabaseAuthProvider(client)

        await auth.complete_sign_in("code-123")
        await auth.sign_out()

        assert client.auth.exchanged == [{"auth_code": "code-123"}]
        assert client.auth.signed_out is True

    def test_listener_receives_sessions(self):
        client = FakeSupabaseClient()
        auth = SupabaseAuthProvider(client)
        received = []

        auth.on_session_change(received.append)
        auth.on_session_change(lambda s: None)
        # One subscription regardless of listener count
        assert len(client.auth.callbacks) == 1

        callback = client.auth.callbacks[0]
        callback("SIGNED_IN", supabase_session("u9", None))
        callback("TOKEN_REFRESHED", supabase_session("u9", None))
        callback("SIGNED_OUT", None)

        assert received == [Session(user_id="u9"), None]
