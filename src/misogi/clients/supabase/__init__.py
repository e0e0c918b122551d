"""Supabase remote backend."""

from .client import SupabaseAuthProvider, SupabaseRemoteLogStore, create_supabase_client

__all__ = ["create_supabase_client", "SupabaseAuthProvider", "SupabaseRemoteLogStore"]
