"""Shared-SQLite remote backend."""

from .client import SqliteRemoteLogStore, StaticAuthProvider

__all__ = ["SqliteRemoteLogStore", "StaticAuthProvider"]
