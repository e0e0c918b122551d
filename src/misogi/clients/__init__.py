"""Remote log store and auth provider backends."""

from ..config import Settings
from .base import AuthProvider, RemoteLogStore


def build_remote(settings: Settings) -> tuple[RemoteLogStore, AuthProvider] | None:
    """Create the remote store and auth provider selected by the settings.

    Returns:
        A ``(store, auth)`` pair, or None when no remote is configured
    """
    settings.validate()

    if settings.remote == "supabase":
        from .supabase import (
            SupabaseAuthProvider,
            SupabaseRemoteLogStore,
            create_supabase_client,
        )

        client = create_supabase_client(settings.supabase_url, settings.supabase_key)
        return (
            SupabaseRemoteLogStore(client),
            SupabaseAuthProvider(client, redirect_url=settings.redirect_url),
        )

    if settings.remote == "sqlite":
        from .sqlite import SqliteRemoteLogStore, StaticAuthProvider

        # Without a configured user the app starts signed out
        auth = StaticAuthProvider(
            user_id=settings.user_id or "local",
            signed_in=settings.user_id is not None,
        )
        return SqliteRemoteLogStore(settings.remote_db), auth

    return None


__all__ = ["AuthProvider", "build_remote", "RemoteLogStore"]
