"""Shared fixtures for end-to-end sync tests."""

import pytest

from misogi.clients.sqlite import SqliteRemoteLogStore, StaticAuthProvider
from misogi.db.repositories import LocalLogStore
from misogi.services.sync import RemoteSyncController


@pytest.fixture
def remote(tmp_path):
    """A SQLite remote shared by every device in a test."""
    return SqliteRemoteLogStore(tmp_path / "remote.db")


@pytest.fixture
def make_device(tmp_path, remote):
    """Build controllers with their own local store, signed in to the shared remote."""

    def _make(name: str, user_id: str = "me") -> RemoteSyncController:
        return RemoteSyncController(
            LocalLogStore(tmp_path / f"{name}.db"),
            remote,
            StaticAuthProvider(user_id),
        )

    return _make
