"""Supabase-hosted remote log store and auth provider."""

import asyncio
import logging
from typing import Any

from ...exceptions import RemoteStoreError
from ...models.log import RemoteLogRow
from ...models.session import Session
from ..base import ListenerRegistry, SessionListener

logger = logging.getLogger(__name__)

TABLE_NAME = "daily_logs"

# Events after which the session should be re-read
SESSION_EVENTS = {"SIGNED_IN", "SIGNED_OUT", "USER_DELETED"}


def create_supabase_client(url: str, key: str) -> Any:
    """Create a Supabase client for the project."""
    from supabase import create_client

    return create_client(url, key)


def _session_from_supabase(raw: Any) -> Session | None:
    """Convert a Supabase auth session into a Session."""
    if raw is None or getattr(raw, "user", None) is None:
        return None
    return Session(user_id=str(raw.user.id), email=getattr(raw.user, "email", None))


class SupabaseRemoteLogStore:
    """Mirror of the log document in the Supabase ``daily_logs`` table.

    The table needs a unique constraint on ``(user_id, date)``; upserts use it
    as the conflict target, so a later write replaces the earlier row.
    The Supabase client is blocking, so calls run in a worker thread.
    """

    def __init__(self, client: Any, table: str = TABLE_NAME):
        self.client = client
        self.table = table

    def _query(self, user_id: str) -> list[dict]:
        response = self.client.table(self.table).select("*").eq("user_id", user_id).execute()
        return response.data or []

    def _upsert(self, record: dict) -> None:
        self.client.table(self.table).upsert(record, on_conflict="user_id,date").execute()

    async def query(self, user_id: str) -> list[RemoteLogRow]:
        """Fetch every row stored for a user."""
        try:
            records = await asyncio.to_thread(self._query, user_id)
        except Exception as e:
            raise RemoteStoreError(f"Query for user {user_id} failed: {e}") from e
        return [RemoteLogRow.from_record(record) for record in records]

    async def upsert(self, row: RemoteLogRow) -> None:
        """Insert a row or replace the one stored for ``(user_id, date)``."""
        try:
            await asyncio.to_thread(self._upsert, row.to_record())
        except Exception as e:
            raise RemoteStoreError(
                f"Upsert for user {row.user_id} on {row.date} failed: {e}"
            ) from e


class SupabaseAuthProvider:
    """Supabase Auth sessions with OAuth redirect sign-in.

    ``sign_in`` only returns the provider URL. The session appears later,
    when Supabase fires its auth state change event.
    """

    def __init__(
        self,
        client: Any,
        provider: str = "google",
        redirect_url: str | None = None,
    ):
        self.client = client
        self.provider = provider
        self.redirect_url = redirect_url
        self._listeners = ListenerRegistry()
        self._subscribed = False

    def _handle_auth_event(self, event: Any, raw_session: Any) -> None:
        name = getattr(event, "value", event)
        if name not in SESSION_EVENTS:
            return
        session = _session_from_supabase(raw_session) if name == "SIGNED_IN" else None
        logger.info("Auth state changed: %s", name)
        self._listeners.notify(session)

    async def get_current_session(self) -> Session | None:
        try:
            raw = await asyncio.to_thread(self.client.auth.get_session)
        except Exception as e:
            logger.warning("Could not read current session: %s", e)
            return None
        return _session_from_supabase(raw)

    def on_session_change(self, listener: SessionListener) -> None:
        self._listeners.add(listener)
        if not self._subscribed:
            self.client.auth.on_auth_state_change(self._handle_auth_event)
            self._subscribed = True

    async def sign_in(self) -> str | None:
        """Start the OAuth flow and return the URL to send the user to."""
        credentials: dict = {"provider": self.provider}
        if self.redirect_url:
            credentials["options"] = {"redirect_to": self.redirect_url}
        response = await asyncio.to_thread(self.client.auth.sign_in_with_oauth, credentials)
        return getattr(response, "url", None)

    async def complete_sign_in(self, code: str) -> None:
        """Exchange the OAuth callback code for a session.

        Supabase emits ``SIGNED_IN`` on success, which notifies listeners.
        """
        await asyncio.to_thread(
            self.client.auth.exchange_code_for_session, {"auth_code": code}
        )

    async def sign_out(self) -> None:
        await asyncio.to_thread(self.client.auth.sign_out)
